# GreenShop - application entry point
# `flask run` and `flask reconcile-checkouts` pick up the app from here.

import os

from greenshop import create_app

app = create_app(os.environ.get('FLASK_CONFIG', 'development'))


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
