"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- Tenor API ---
TENOR_API_KEY: str = os.getenv("TENOR_API_KEY", "")
TENOR_CLIENT_KEY: str = os.getenv("TENOR_CLIENT_KEY", "tenor-collector")
TENOR_BASE_URL: str = os.getenv("TENOR_BASE_URL", "https://tenor.googleapis.com/v2")
TENOR_BASE_URL_V1: str = os.getenv("TENOR_BASE_URL_V1", "https://g.tenor.com/v1")
TENOR_VIEW_URL_TEMPLATE = "https://tenor.com/view/{id}"

# search の limit 上限
MAX_PAGE_SIZE = 50

# --- 共有数スクレイピング ---
# チャンネル取得 1 回あたり先頭 N 件のみページを取得する
SCRAPE_BUDGET = 50
SCRAPE_TIMEOUT = 5  # 秒

# --- 順位計測 ---
RANK_MAX_PAGES = int(os.getenv("RANK_MAX_PAGES", "20"))
TAG_RANK_MAX_PAGES = int(os.getenv("TAG_RANK_MAX_PAGES", "10"))
RANK_MAX_TAGS = int(os.getenv("RANK_MAX_TAGS", "10"))

# --- User-Agent ---
PC_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# --- リクエスト設定 ---
REQUEST_TIMEOUT = 15  # 秒

# ステップごとの待機秒数
PACING_INTERVALS = {
    "page": 0.5,  # チャンネル・キーワード取得のページ間
    "scrape": 0.2,  # 共有数スクレイピング 1 件ごと
    "rank_page": 0.4,  # 順位計測のページ間
    "tag": 0.3,  # タグ間
}
PACING_JITTER = 0.0

# --- キーワード取得・トレンド取得の上限件数 ---
SEARCH_MAX_ITEMS = 200
TRENDING_MAX_ITEMS = 200

# --- 出力 ---
OUTPUT_JSON = os.getenv("OUTPUT_JSON", "tenor_channel_gifs.json")
OUTPUT_CSV = os.getenv("OUTPUT_CSV", "tenor_channel_gifs.csv")
OUTPUT_STICKER_CSV = os.getenv("OUTPUT_STICKER_CSV", "tenor_channel_stickers.csv")

# --- API サーバー ---
PORT = int(os.getenv("PORT", "4000"))

# --- ログ ---
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)
