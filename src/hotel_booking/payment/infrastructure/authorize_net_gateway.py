import json
import os

import requests
from aws_lambda_powertools import Logger

from hotel_booking.payment.domain.gateway import PaymentGateway
from hotel_booking.payment.domain.value_object import CardDetails, ChargeContext
from hotel_booking.shared.domain import Deadline, Money, RetryPolicy
from hotel_booking.shared.domain.exception import (
    GatewayDeclinedException,
    GatewayUnreachableException,
    HoldNotFoundException,
)

logger = Logger(child=True)

SANDBOX_ENDPOINT = "https://apitest.authorize.net/xml/v1/request.api"
PRODUCTION_ENDPOINT = "https://api.authorize.net/xml/v1/request.api"

HOLD_NOT_FOUND_MESSAGE = "The transaction cannot be found"
DEFAULT_TIMEOUT_SECONDS = 15.0

TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


class AuthorizeNetGateway(PaymentGateway):
    """Authorize.Net の JSON API を使った PaymentGateway の具象実装

    - 通信障害（接続失敗・タイムアウト）のみ 1 回だけ再試行する
    - 拒否は再試行せず、ゲートウェイの文言をそのまま例外に載せる
    """

    def __init__(
        self,
        api_login_id: str | None = None,
        transaction_key: str | None = None,
        environment: str | None = None,
        timeout_seconds: float | None = None,
        session: requests.Session | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.api_login_id = api_login_id or os.getenv("AUTHORIZE_NET_API_LOGIN_ID", "")
        self.transaction_key = transaction_key or os.getenv(
            "AUTHORIZE_NET_TRANSACTION_KEY", ""
        )
        environment = environment or os.getenv("AUTHORIZE_NET_ENV", "sandbox")
        self.endpoint = (
            PRODUCTION_ENDPOINT if environment == "production" else SANDBOX_ENDPOINT
        )
        self.timeout_seconds = timeout_seconds or float(
            os.getenv("GATEWAY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
        )
        self.session = session or requests.Session()
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=2, backoff_seconds=0.2
        )

    def authorize_only(
        self, card: CardDetails, amount: Money, context: ChargeContext, deadline: Deadline
    ) -> str:
        return self._transact(
            {
                "transactionType": "authOnlyTransaction",
                "amount": amount.formatted(),
                "payment": self._payment(card),
                "order": self._order(context),
                "billTo": self._bill_to(context),
                "userFields": self._user_fields(context),
            },
            deadline,
        )

    def capture_hold(
        self, hold_reference: str, amount: Money, context: ChargeContext, deadline: Deadline
    ) -> str:
        return self._transact(
            {
                "transactionType": "priorAuthCaptureTransaction",
                "amount": amount.formatted(),
                "refTransId": hold_reference,
            },
            deadline,
            hold_lookup=True,
        )

    def authorize_and_capture(
        self, card: CardDetails, amount: Money, context: ChargeContext, deadline: Deadline
    ) -> str:
        return self._transact(
            {
                "transactionType": "authCaptureTransaction",
                "amount": amount.formatted(),
                "payment": self._payment(card),
                "order": self._order(context),
                "billTo": self._bill_to(context),
            },
            deadline,
        )

    def _transact(
        self, transaction_request: dict, deadline: Deadline, hold_lookup: bool = False
    ) -> str:
        transaction_type = transaction_request["transactionType"]
        data = self._send(transaction_request, deadline)

        transaction_response = data.get("transactionResponse") or {}
        if (
            data.get("messages", {}).get("resultCode") == "Ok"
            and transaction_response.get("responseCode") == "1"
        ):
            transaction_id = transaction_response["transId"]
            logger.info(
                "Gateway transaction approved",
                extra={"transaction_type": transaction_type, "transaction_id": transaction_id},
            )
            return transaction_id

        reason = self._error_text(data)
        logger.warning(
            "Gateway transaction declined",
            extra={"transaction_type": transaction_type, "reason": reason},
        )
        if hold_lookup and HOLD_NOT_FOUND_MESSAGE.lower() in reason.lower():
            raise HoldNotFoundException(reason)
        raise GatewayDeclinedException(reason)

    def _send(self, transaction_request: dict, deadline: Deadline) -> dict:
        payload = {
            "createTransactionRequest": {
                "merchantAuthentication": {
                    "name": self.api_login_id,
                    "transactionKey": self.transaction_key,
                },
                "transactionRequest": transaction_request,
            }
        }

        def post() -> requests.Response:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=deadline.timeout_for(self.timeout_seconds),
            )
            response.raise_for_status()
            return response

        try:
            response = self.retry_policy.call(post, retry_on=TRANSIENT_ERRORS)
        except TRANSIENT_ERRORS as e:
            raise GatewayUnreachableException(
                f"Payment gateway is unreachable: {e}"
            ) from e
        except requests.RequestException as e:
            raise GatewayUnreachableException(f"Payment gateway error: {e}") from e

        try:
            # Authorize.Net は BOM 付きの JSON を返す
            return json.loads(response.content.decode("utf-8-sig"))
        except (UnicodeDecodeError, ValueError) as e:
            raise GatewayUnreachableException(
                "Payment gateway returned an invalid response"
            ) from e

    @staticmethod
    def _error_text(data: dict) -> str:
        errors = (data.get("transactionResponse") or {}).get("errors") or []
        if errors and errors[0].get("errorText"):
            return errors[0]["errorText"]
        messages = (data.get("messages") or {}).get("message") or []
        if messages and messages[0].get("text"):
            return messages[0]["text"]
        return "Transaction failed."

    @staticmethod
    def _payment(card: CardDetails) -> dict:
        return {
            "creditCard": {
                "cardNumber": card.number,
                "expirationDate": card.expiry,
                "cardCode": card.cvv,
            }
        }

    @staticmethod
    def _order(context: ChargeContext) -> dict:
        return {
            "invoiceNumber": context.invoice_number or "N/A",
            "description": context.description or "Hotel reservation",
        }

    @staticmethod
    def _bill_to(context: ChargeContext) -> dict:
        return {
            "firstName": context.first_name,
            "lastName": context.last_name,
            "country": context.nationality or "US",
            "email": context.email,
        }

    @staticmethod
    def _user_fields(context: ChargeContext) -> dict:
        return {
            "userField": [
                {"name": "checkin_date", "value": context.check_in},
                {"name": "checkout_date", "value": context.check_out},
                {"name": "hotel_id", "value": context.hotel_id},
            ]
        }
