CREATE_SQLITE = """CREATE TABLE IF NOT EXISTS "users" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	email TEXT NOT NULL UNIQUE,
	password TEXT NOT NULL,
	full_name TEXT,
	phone TEXT,
	roll_number TEXT,
	department TEXT,
	student_class TEXT,
	type TEXT DEFAULT 'user' NOT NULL,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "profiles" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	user_id TEXT NOT NULL UNIQUE,
	full_name TEXT,
	phone TEXT,
	roll_number TEXT,
	department TEXT,
	student_class TEXT,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "user_roles" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	user_id TEXT NOT NULL,
	role TEXT DEFAULT 'user' NOT NULL CHECK (role IN ('admin', 'moderator', 'user')),
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "contact_messages" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	name TEXT NOT NULL,
	email TEXT NOT NULL,
	subject TEXT NOT NULL,
	message TEXT NOT NULL,
	is_seen BOOLEAN DEFAULT 0 NOT NULL,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "book_borrows" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	user_id TEXT NOT NULL,
	book_id TEXT,
	book_title TEXT NOT NULL,
	isbn TEXT,
	borrow_date DATETIME NOT NULL,
	due_date DATETIME,
	return_date DATETIME,
	status TEXT DEFAULT 'borrowed' NOT NULL,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "library_card_applications" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	user_id TEXT,
	first_name TEXT NOT NULL,
	last_name TEXT NOT NULL,
	father_name TEXT,
	dob DATE,
	student_class TEXT NOT NULL,
	field TEXT,
	roll_no TEXT NOT NULL,
	email TEXT NOT NULL,
	phone TEXT NOT NULL,
	address_street TEXT NOT NULL,
	address_city TEXT NOT NULL,
	address_state TEXT NOT NULL,
	address_zip TEXT NOT NULL,
	status TEXT DEFAULT 'pending' NOT NULL,
	card_number TEXT UNIQUE,
	student_id TEXT,
	issue_date DATE,
	valid_through DATE,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "donations" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	donor_name TEXT,
	email TEXT,
	book_title TEXT,
	author TEXT,
	quantity INTEGER,
	message TEXT,
	status TEXT DEFAULT 'received' NOT NULL,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "notes" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	student_class TEXT NOT NULL,
	subject TEXT NOT NULL,
	title TEXT NOT NULL,
	description TEXT,
	pdf_path TEXT,
	status TEXT DEFAULT 'active' NOT NULL,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);

CREATE TABLE IF NOT EXISTS "rare_books" (
	id TEXT PRIMARY KEY CHECK (LENGTH(id) <= 32),
	title TEXT NOT NULL,
	description TEXT,
	category TEXT DEFAULT 'General' NOT NULL,
	pdf_path TEXT,
	status TEXT DEFAULT 'active' NOT NULL,
	created_at DATETIME NOT NULL,
	updated_at DATETIME
);
"""


CREATE_POSTGRES = """CREATE TABLE IF NOT EXISTS "users" (
	id VARCHAR(32) PRIMARY KEY,
	email VARCHAR NOT NULL,
	password VARCHAR NOT NULL,
	full_name VARCHAR,
	phone VARCHAR,
	roll_number VARCHAR,
	department VARCHAR,
	student_class VARCHAR,
	type VARCHAR(20) DEFAULT 'user' NOT NULL,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP,
	UNIQUE (email)
);

CREATE TABLE IF NOT EXISTS "profiles" (
	id VARCHAR(32) PRIMARY KEY,
	user_id VARCHAR(32) NOT NULL,
	full_name VARCHAR,
	phone VARCHAR,
	roll_number VARCHAR,
	department VARCHAR,
	student_class VARCHAR,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP,
	UNIQUE (user_id)
);

CREATE TABLE IF NOT EXISTS "user_roles" (
	id VARCHAR(32) PRIMARY KEY,
	user_id VARCHAR(32) NOT NULL,
	role VARCHAR(20) DEFAULT 'user' NOT NULL CHECK (role IN ('admin', 'moderator', 'user')),
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS "contact_messages" (
	id VARCHAR(32) PRIMARY KEY,
	name VARCHAR NOT NULL,
	email VARCHAR NOT NULL,
	subject VARCHAR NOT NULL,
	message VARCHAR NOT NULL,
	is_seen BOOLEAN DEFAULT '0' NOT NULL,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS "book_borrows" (
	id VARCHAR(32) PRIMARY KEY,
	user_id VARCHAR(32) NOT NULL,
	book_id VARCHAR,
	book_title VARCHAR NOT NULL,
	isbn VARCHAR,
	borrow_date TIMESTAMP NOT NULL,
	due_date TIMESTAMP,
	return_date TIMESTAMP,
	status VARCHAR(20) DEFAULT 'borrowed' NOT NULL,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS "library_card_applications" (
	id VARCHAR(32) PRIMARY KEY,
	user_id VARCHAR(32),
	first_name VARCHAR NOT NULL,
	last_name VARCHAR NOT NULL,
	father_name VARCHAR,
	dob DATE,
	student_class VARCHAR NOT NULL,
	field VARCHAR,
	roll_no VARCHAR NOT NULL,
	email VARCHAR NOT NULL,
	phone VARCHAR NOT NULL,
	address_street VARCHAR NOT NULL,
	address_city VARCHAR NOT NULL,
	address_state VARCHAR NOT NULL,
	address_zip VARCHAR NOT NULL,
	status VARCHAR(20) DEFAULT 'pending' NOT NULL,
	card_number VARCHAR,
	student_id VARCHAR(20),
	issue_date DATE,
	valid_through DATE,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP,
	UNIQUE (card_number)
);

CREATE TABLE IF NOT EXISTS "donations" (
	id VARCHAR(32) PRIMARY KEY,
	donor_name VARCHAR,
	email VARCHAR,
	book_title VARCHAR,
	author VARCHAR,
	quantity INTEGER,
	message VARCHAR,
	status VARCHAR(20) DEFAULT 'received' NOT NULL,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS "notes" (
	id VARCHAR(32) PRIMARY KEY,
	student_class VARCHAR NOT NULL,
	subject VARCHAR NOT NULL,
	title VARCHAR NOT NULL,
	description VARCHAR,
	pdf_path VARCHAR,
	status VARCHAR(20) DEFAULT 'active' NOT NULL,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS "rare_books" (
	id VARCHAR(32) PRIMARY KEY,
	title VARCHAR NOT NULL,
	description VARCHAR,
	category VARCHAR DEFAULT 'General' NOT NULL,
	pdf_path VARCHAR,
	status VARCHAR(20) DEFAULT 'active' NOT NULL,
	created_at TIMESTAMP NOT NULL,
	updated_at TIMESTAMP
);
"""
