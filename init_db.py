from networks import create_app, db

app = create_app()
with app.app_context():
    from networks import models  # noqa: F401
    print("Creating all tables...")
    db.create_all()
    print("Done.")
