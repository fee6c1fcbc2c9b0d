if __name__ == "__main__":
    import os

    os.environ.setdefault("FLASK_ENV", "dev")
    from config import config_dict
    from library_portal import create_app

    app = create_app(config=config_dict[os.environ["FLASK_ENV"]])
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=app.config["DEBUG"])
