from confreg import create_app
import os

app = create_app(os.getenv('FLASK_CONFIG') or 'default')

if __name__ == '__main__':
    # Bind to localhost without the reloader; use a WSGI server in production.
    app.run(host='127.0.0.1', port=5001, debug=True, use_reloader=False)
