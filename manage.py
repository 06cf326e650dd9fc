import os

from config import config
from seatwatch import create_app

app = create_app(config[os.environ.get('FLASK_CONFIG', 'default')])


if __name__ == '__main__':
    app.run(debug=app.config.get('DEBUG', False))
