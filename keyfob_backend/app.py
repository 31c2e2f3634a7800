"""
FLASK APP ENTRY POINT - KEYFOB SIMULATOR
========================================

Builds the Flask app, enables CORS so a browser front-end on another
port can drive the device, and registers the device API.

    keyfob --accounts accounts.json serve --port 5000
    curl http://localhost:5000/api/v2/display
"""
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from keyfob.accounts import AccountRegistry
from keyfob.config import ConfigError

from .device import Device
from .routes import device_bp

logger = logging.getLogger(__name__)


def create_app(accounts_path: str = None, account: str = None, device: Device = None,
               **device_options) -> Flask:
    """
    Create the app around one device.

    Either pass a ready Device (tests do), or an accounts file to build one.

    Raises:
        ConfigError: accounts file unusable, or no such initial account
    """
    if device is None:
        registry = AccountRegistry.from_file(accounts_path)
        if account:
            try:
                registry.selected_index = registry.find(account)
            except KeyError:
                raise ConfigError(f"No account named '{account}'") from None
        device = Device(registry, **device_options)

    app = Flask(__name__)
    app.config['DEVICE'] = device
    CORS(app)
    app.register_blueprint(device_bp)

    @app.route('/', methods=['GET'])
    def index():
        """API overview."""
        return jsonify({
            "service": "keyfob simulator",
            "endpoints": {
                "GET /api/v2/display": "tick once, return the display frame",
                "POST /api/v2/buttons/<advance|request>": "body {\"pressed\": bool}",
                "GET /api/v2/keystrokes": "codes typed since last call",
                "GET /api/v2/accounts": "account labels and current selection",
                "GET /api/v2/otpauth_uri?index=&issuer=": "enrollment URI for an account",
            },
        })

    logger.info("Keyfob simulator ready with %d account(s)", len(device.registry))
    return app
