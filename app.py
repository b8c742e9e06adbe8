from moodease import create_app
from moodease.models import db

# -------------------- APP SETUP --------------------

app = create_app()

# -------------------- RUN SERVER --------------------

if __name__ == "__main__":
    with app.app_context():
        db.create_all()

    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config.get("DEBUG", False))
