"""
Клиент платёжного шлюза (YooKassa-совместимый API).
В mock режиме платёж всегда считается успешным.
"""
import logging
from decimal import Decimal

import requests
from django.conf import settings
from requests.auth import HTTPBasicAuth

from api.exceptions import ServiceError

logger = logging.getLogger(__name__)

STATUS_SUCCEEDED = 'succeeded'


class PaymentGateway:

    def __init__(self, mock=None, api_url=None, account_id=None, secret_key=None, timeout=10):
        self.mock = settings.PAYMENT_MOCK if mock is None else mock
        self.api_url = (api_url or settings.PAYMENT_API_URL).rstrip('/')
        self.account_id = account_id or settings.PAYMENT_ACCOUNT_ID
        self.secret_key = secret_key or settings.PAYMENT_SECRET_KEY
        self.timeout = timeout

    def fetch_payment(self, payment_id, expected_amount=None):
        """
        Returns {'payment_id', 'status', 'amount', 'paid'} for the given payment.
        Mock mode echoes `expected_amount` back as the paid amount.
        """
        if self.mock:
            logger.info(f'[MOCK] Проверка платежа {payment_id}')
            return {
                'payment_id': payment_id,
                'status': STATUS_SUCCEEDED,
                'amount': Decimal(str(expected_amount or 0)),
                'paid': True,
            }

        try:
            response = requests.get(
                f'{self.api_url}/payments/{payment_id}',
                auth=HTTPBasicAuth(self.account_id, self.secret_key),
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f'[PAYMENT] Шлюз недоступен: {e}')
            raise ServiceError(f'Ошибка при проверке платежа: {e}')

        if response.status_code not in (200, 201):
            logger.warning(f'[PAYMENT] {payment_id}: HTTP {response.status_code}')
            raise ServiceError(f'Платёж не найден: {response.text}')

        payment = response.json()
        return {
            'payment_id': payment['id'],
            'status': payment['status'],
            'amount': Decimal(str(payment['amount']['value'])),
            'paid': payment['status'] == STATUS_SUCCEEDED,
        }
