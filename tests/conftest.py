import os

# ハンドラはモジュール読み込み時にクライアントを生成するため、import 前に設定する
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("TABLE_NAME", "hotel-booking-test")
os.environ.setdefault("EVENT_BUS_NAME", "hotel-booking-test")
os.environ.setdefault("CARD_ENCRYPTION_KEY", "test-card-encryption-key")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "hotel-booking-test")
