from flask import Flask, request, jsonify
from flask_cors import CORS
from flasgger import Swagger, swag_from

from constants import PORT, HOST, MAX_CONTENT_LENGTH
from server.processor import detect_corners_func, normalize_corners_func, rectify_func, crop_selected_area_func


app = Flask(__name__)

# Enable CORS for all routes
CORS(app)

# Photos arrive as base64 data URLs inside JSON
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
app.config['MAX_FORM_MEMORY_SIZE'] = MAX_CONTENT_LENGTH

# Setup Swagger
swagger_config = {
    "specs_route": "/docs/",
    "specs": [
        {
            "endpoint": 'apispec_1',
            "route": '/docs-json',
            "rule_filter": lambda rule: True,  # all in
            "model_filter": lambda tag: True,  # all in
        }
    ],
}
swagger = Swagger(app, swagger_config, merge=True)


def get_payload():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    return payload


@app.route('/is-available', methods=['GET'])
@swag_from("server/swagger/is-available.yml")
def is_available():
    return jsonify(isAvailable=True), 200


@app.route('/detect-corners', methods=['POST'])
@swag_from("server/swagger/detect-corners.yml")
def detect_corners():
    payload = get_payload()
    if payload is None:
        return jsonify(message="Expected JSON body"), 400

    result, status = detect_corners_func(payload)
    print(f"[DETECT] status={status}")
    return jsonify(result), status


@app.route('/normalize-corners', methods=['POST'])
@swag_from("server/swagger/normalize-corners.yml")
def normalize_corners():
    payload = get_payload()
    if payload is None:
        return jsonify(message="Expected JSON body"), 400

    result, status = normalize_corners_func(payload)
    return jsonify(result), status


@app.route('/rectify', methods=['POST'])
@swag_from("server/swagger/rectify.yml")
def rectify_area():
    payload = get_payload()
    if payload is None:
        return jsonify(message="Expected JSON body"), 400

    result, status = rectify_func(payload)
    return jsonify(result), status


@app.route('/crop-selected-area', methods=['POST'])
@swag_from("server/swagger/crop-selected-area.yml")
def crop_area():
    payload = get_payload()
    if payload is None:
        return jsonify(message="Expected JSON body"), 400

    result, status = crop_selected_area_func(payload)
    return jsonify(result), status


if __name__ == "__main__":
    app.run(debug=True, port=PORT, host=HOST)
