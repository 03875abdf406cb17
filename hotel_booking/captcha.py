# hotel_booking/captcha.py
import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)


def verify_recaptcha(token, remote_ip=None):
    """Ask the reCAPTCHA service about ``token``.

    Always True when no secret is configured.
    """
    secret = current_app.config.get('RECAPTCHA_SECRET_KEY')
    if not secret:
        return True
    if not token:
        return False

    payload = {'secret': secret, 'response': token}
    if remote_ip:
        payload['remoteip'] = remote_ip

    try:
        resp = requests.post(
            current_app.config['RECAPTCHA_VERIFY_URL'],
            data=payload,
            timeout=current_app.config['RECAPTCHA_TIMEOUT'],
        )
        resp.raise_for_status()
        result = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning('reCAPTCHA verification failed: %s', e)
        return False

    return bool(result.get('success'))
