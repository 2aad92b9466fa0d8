class DomainException(Exception):
    """ドメイン層で発生する基底例外"""

    pass


class ValidationException(DomainException):
    """入力値（ゲスト情報・決済情報）が不正な場合"""

    pass


class ResourceNotFoundException(DomainException):
    """リソースが見つからない場合"""

    pass


class BusinessRuleViolationException(DomainException):
    """ビジネスルールに違反した場合"""

    pass


class DuplicateResourceException(DomainException):
    """リソースの重複エラー（条件付き書き込みの失敗時）"""

    pass


class OptimisticLockException(DomainException):
    """楽観ロックの競合エラー（バージョンが期待値と異なる場合）"""

    pass


class DuplicateReservationException(BusinessRuleViolationException):
    """同一内容の予約が既に存在する場合（二重送信・リトライ）"""

    def __init__(self, existing_confirmation_number: str) -> None:
        super().__init__(
            f"A matching reservation already exists: {existing_confirmation_number}"
        )
        self.existing_confirmation_number = existing_confirmation_number


class AllocationExhaustedException(DomainException):
    """確認番号の採番が再試行上限に達した場合"""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Could not allocate a unique confirmation number after {attempts} attempts"
        )
        self.attempts = attempts


class PaymentException(DomainException):
    """決済ゲートウェイ関連の基底例外"""

    pass


class GatewayDeclinedException(PaymentException):
    """ゲートウェイがカード・取引を拒否した場合（自動リトライしない）"""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class GatewayUnreachableException(PaymentException):
    """通信障害・タイムアウトでゲートウェイに到達できない場合"""

    pass


class HoldNotFoundException(PaymentException):
    """与信（ホールド）が失効・不明な場合

    利用者には見せず、直接請求へのフォールバックの契機として使う。
    """

    pass


class DecryptionFailedException(DomainException):
    """保存済みカード情報を復号できない場合（データ整合性の障害）"""

    pass


class AlreadyCapturedException(BusinessRuleViolationException):
    """予約金額が既に全額請求済みの場合"""

    pass


class CaptureAmountExceedsBalanceException(BusinessRuleViolationException):
    """請求額が未払い残高を超える場合"""

    pass


class CaptureInProgressException(OptimisticLockException):
    """同じ予約に対する請求処理が実行中の場合"""

    pass


class SettlementNotRecordedException(DomainException):
    """ゲートウェイでは決済済みだが台帳への記録に失敗した場合

    外部の照合（リコンサイル）が必要になる。
    """

    def __init__(self, message: str, settled_reference: str) -> None:
        super().__init__(message)
        self.settled_reference = settled_reference


class DeadlineExceededException(DomainException):
    """呼び出し元が指定した期限を過ぎた場合"""

    pass
