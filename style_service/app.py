import logging

from flask import Flask, request, jsonify

from style_service.config import load_style_expectations
from style_service.evaluator import ElementStyleSnapshot, evaluate_page, report_to_dicts

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Style guide for requests that don't send their own.
app.config['STYLE_EXPECTATIONS'] = load_style_expectations()


@app.route('/style-expectations', methods=['GET'])
def style_expectations():
    return jsonify(app.config['STYLE_EXPECTATIONS'])


@app.route('/evaluate-styles', methods=['POST'])
def evaluate_styles():
    """
    Checks element styles collected by a browser driver against the style guide.
    Accepts JSON with 'elements' (list of computed-style records) and an optional
    'expectations' table that overrides the configured one.
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        elements = data.get('elements')
        if not isinstance(elements, list):
            return jsonify({'error': 'Missing required field: elements (list)'}), 400

        expectations = data.get('expectations')
        if expectations is None:
            expectations = app.config['STYLE_EXPECTATIONS']
        elif not isinstance(expectations, dict):
            return jsonify({'error': 'expectations must be an object keyed by tag name'}), 400
        else:
            expectations = {str(tag).lower(): rule for tag, rule in expectations.items()}

        snapshots = [ElementStyleSnapshot.from_dict(element) for element in elements
                     if isinstance(element, dict)]
        report = evaluate_page(snapshots, expectations)

        return jsonify({
            'passed': not report,
            'checked': len(snapshots),
            'mismatches': report_to_dicts(report),
        })

    except Exception as e:
        logger.exception("Error during style evaluation")
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(host='0.0.0.0', port=5001, debug=True)
