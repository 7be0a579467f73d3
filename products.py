"""
Barcode validation and product lookup against Open Food Facts
"""

import logging
import re

import requests

from config import DEFAULT_OFF_BASE_URL, DEFAULT_USER_AGENT
from errors import FetchTimeout, NetworkError, UnknownFetchError, UpstreamError

logger = logging.getLogger(__name__)

# Open Food Facts product endpoint
PRODUCT_PATH = "/api/v0/product/{}.json"

BARCODE_PATTERN = re.compile(r'^\d+$', re.ASCII)
BARCODE_LENGTHS = (12, 13)  # UPC-A, EAN-13


def validate_barcode(barcode):
    """Check that barcode is a 12 or 13 digit string, ignoring surrounding whitespace"""
    if not isinstance(barcode, str):
        return False

    barcode = barcode.strip()
    return bool(BARCODE_PATTERN.match(barcode)) and len(barcode) in BARCODE_LENGTHS


def _not_found_body(response):
    """True when a 404 reply is Open Food Facts saying the product is unknown"""
    try:
        data = response.json()
    except ValueError:
        return False
    return isinstance(data, dict) and data.get('status') == 0


def fetch_product_data(barcode, base_url=DEFAULT_OFF_BASE_URL, timeout=10,
                       user_agent=DEFAULT_USER_AGENT):
    """
    Fetch the raw product record for barcode.

    Returns the product dict, or None when Open Food Facts does not know the
    barcode. Transport problems raise FetchTimeout, UpstreamError,
    NetworkError or UnknownFetchError.
    """
    barcode = barcode.strip()
    url = base_url.rstrip('/') + PRODUCT_PATH.format(barcode)
    logger.info("Searching for product with barcode: %s", barcode)

    try:
        response = requests.get(url, headers={'User-Agent': user_agent}, timeout=timeout)

        if response.status_code == 404 and _not_found_body(response):
            logger.info("Product %s not found in OpenFoodFacts database", barcode)
            return None

        response.raise_for_status()
        api_data = response.json()

    except requests.exceptions.Timeout:
        logger.warning("OpenFoodFacts request for %s timed out", barcode)
        raise FetchTimeout()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else 'unknown'
        reason = e.response.reason if e.response is not None else ''
        logger.warning("OpenFoodFacts returned %s for %s", status, barcode)
        raise UpstreamError(status, reason or '')
    except ValueError as e:
        # undecodable body; requests' JSONDecodeError is also a RequestException
        logger.error("Could not decode OpenFoodFacts reply for %s: %s", barcode, e)
        raise UnknownFetchError(str(e))
    except requests.exceptions.RequestException as e:
        logger.warning("OpenFoodFacts unreachable: %s", e)
        raise NetworkError()
    except Exception as e:
        logger.error("Unexpected error fetching %s: %s", barcode, e)
        raise UnknownFetchError(str(e))

    if not isinstance(api_data, dict):
        raise UnknownFetchError('Malformed response from OpenFoodFacts')

    product = api_data.get('product')
    if api_data.get('status') == 1 and product:
        logger.info("Product %s found", barcode)
        return product

    logger.info("Product %s not found in OpenFoodFacts database", barcode)
    return None
