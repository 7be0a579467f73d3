"""
NutriScan AI - barcode food health scanner
Flask web application: looks products up on Open Food Facts and returns
an AI health assessment for the scanner page
"""

import logging
from datetime import datetime, timezone

import click
from flask import Flask, current_app, jsonify, render_template, request

from analyzer import analyze_product
from config import configure_logging, load_config
from errors import ConfigurationError, InternalError, InvalidBarcode, ProductNotFound, ScanError
from formatting import format_product_data, format_report
from products import fetch_product_data, validate_barcode

SERVICE_NAME = 'NutriScan AI API'
VERSION = '1.0.0'

settings = load_config()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['NUTRISCAN'] = settings


def run_analysis(barcode, config):
    """
    Validate, fetch, format and analyze one barcode.
    Returns (formatted product, analysis); failures raise ScanError subclasses.
    """
    if not validate_barcode(barcode):
        raise InvalidBarcode(barcode)

    if not config.groq_api_key:
        logger.error("Groq API key not found")
        raise ConfigurationError('GROQ_API_KEY is not set')

    logger.info("Fetching product data...")
    product = fetch_product_data(
        barcode.strip(),
        base_url=config.off_base_url,
        timeout=config.off_timeout,
        user_agent=config.user_agent,
    )
    if product is None:
        raise ProductNotFound(barcode.strip())

    logger.info("Formatting product data...")
    formatted = format_product_data(product)

    logger.info("Running AI analysis...")
    analysis = analyze_product(
        formatted,
        config.groq_api_key,
        model=config.groq_model,
        timeout=config.ai_timeout,
    )
    return formatted, analysis


def build_report(formatted, analysis):
    return {
        'productData': {
            'name': formatted['name'],
            'brand': formatted['brand'],
            'barcode': formatted['barcode']
        },
        'healthScore': analysis['healthScore'],
        'warnings': analysis['warnings'],
        'recommendations': analysis['recommendations'],
        'mainIngredients': analysis['mainIngredients'],
        'allergens': analysis['allergens'],
        'summary': analysis['summary']
    }


@app.before_request
def answer_preflight():
    """CORS preflight requests get an empty 200"""
    if request.method == 'OPTIONS':
        return '', 200


@app.after_request
def add_headers(response):
    headers = response.headers
    headers['Access-Control-Allow-Origin'] = '*'
    headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
    headers['Access-Control-Allow-Headers'] = ('Origin, X-Requested-With, Content-Type, '
                                               'Accept, Authorization')
    # caching disabled for development
    headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    headers['Pragma'] = 'no-cache'
    headers['Expires'] = '0'
    return response


@app.route('/')
def index():
    """Serve the scanner page"""
    return render_template('index.html')


@app.route('/api/analyze', methods=['GET'])
def analyze_barcode():
    """
    Analyze the product behind ?barcode= and return a health report
    """
    barcode = request.args.get('barcode', '')
    logger.info("Web API request for barcode: %s", barcode)

    try:
        formatted, analysis = run_analysis(barcode, current_app.config['NUTRISCAN'])
    except ScanError as e:
        if e.status_code >= 500:
            logger.error("API Error: %s", e)
        else:
            logger.warning("API Error: %s", e)
        return jsonify(e.to_response()), e.status_code

    logger.info("Analysis complete, sending response")
    return jsonify({
        'success': True,
        'report': build_report(formatted, analysis)
    }), 200


@app.route('/api/health', methods=['GET'])
def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec='milliseconds')
    return jsonify({
        'status': 'healthy',
        'service': SERVICE_NAME,
        'timestamp': timestamp.replace('+00:00', 'Z'),
        'version': VERSION
    }), 200


@app.errorhandler(404)
@app.errorhandler(405)
def not_found(e):
    """Unknown paths and unsupported methods both answer as a missing endpoint"""
    return jsonify({
        'success': False,
        'message': 'API endpoint not found'
    }), 404


@app.errorhandler(500)
def internal_error(e):
    """Handle errors nothing else caught"""
    original = getattr(e, 'original_exception', None) or e
    logger.error("Server Error: %s", original, exc_info=original)
    return jsonify(InternalError().to_response()), 500


@app.cli.command('scan')
@click.argument('barcode')
def scan_command(barcode):
    """Analyze BARCODE and print a text report"""
    try:
        formatted, analysis = run_analysis(barcode, current_app.config['NUTRISCAN'])
    except ScanError as e:
        raise click.ClickException(f"{e.public_message} ({e})")

    click.echo(format_report(formatted, analysis))


if __name__ == '__main__':
    # Run the application
    logger.info("NutriScan AI web server starting on http://localhost:%s", settings.port)
    app.run(host='0.0.0.0', port=settings.port)
