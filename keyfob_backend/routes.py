"""
KEYFOB DEVICE API ROUTES - FLASK BLUEPRINT

    curl http://localhost:5000/api/v2/display
    curl -X POST http://localhost:5000/api/v2/buttons/advance -H "Content-Type: application/json" -d '{"pressed": true}'
    curl -X POST http://localhost:5000/api/v2/buttons/advance -H "Content-Type: application/json" -d '{"pressed": false}'
    curl http://localhost:5000/api/v2/keystrokes
"""

from flask import Blueprint, current_app, jsonify, request

from keyfob.otp_core import format_otpauth_uri

from .device import BUTTONS

device_bp = Blueprint('device', __name__, url_prefix='/api/v2')


def _device():
    return current_app.config['DEVICE']


@device_bp.route('/display', methods=['GET'])
def get_display():
    """
    Tick once and return what the screen shows.

    Output:
      {"label": "GitHub", "code_text": "081804", "seconds_remaining": 21,
       "percent_remaining": 70, "clock_valid": true}
    """
    return jsonify(_device().tick())


@device_bp.route('/buttons/<string:name>', methods=['POST'])
def set_button(name):
    """
    Press or release a button, then tick once.

    Input (JSON body):
      {"pressed": true}
    """
    if name not in BUTTONS:
        return jsonify({"error": f"Unknown button '{name}'"}), 404
    data = request.get_json(silent=True)
    if not data or not isinstance(data.get('pressed'), bool):
        return jsonify({"error": "Boolean 'pressed' is required"}), 400

    device = _device()
    frame = device.set_button(name, data['pressed'])
    return jsonify({"buttons": device.button_states(), "display": frame})


@device_bp.route('/keystrokes', methods=['GET'])
def get_keystrokes():
    """Codes typed by the request button since the last call."""
    return jsonify({"typed": _device().keyboard.drain()})


@device_bp.route('/accounts', methods=['GET'])
def get_accounts():
    registry = _device().registry
    return jsonify({"accounts": registry.labels, "selected_index": registry.selected_index})


@device_bp.route('/otpauth_uri', methods=['GET'])
def get_otpauth_uri():
    """
    Enrollment URI for one account (default: the selected one).

      curl "http://localhost:5000/api/v2/otpauth_uri?index=1&issuer=MyKeyfob"
    """
    device = _device()
    registry = device.registry
    index = request.args.get('index', type=int)
    if index is None:
        index = registry.selected_index
    if not 0 <= index < len(registry):
        return jsonify({"error": "Account index out of range"}), 404
    account = registry[index]
    issuer = request.args.get('issuer', 'keyfob')
    uri = format_otpauth_uri(account.encoded_secret, account.label, issuer,
                             period=device.controller.period)
    return jsonify({"label": account.label, "otpauth_uri": uri})
