# ayana/wsgi.py
# For gunicorn: gunicorn ayana.wsgi:app
from ayana.app import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
