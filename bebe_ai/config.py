import os

from dotenv import load_dotenv

load_dotenv()

CRAWL = {
    "root_url": "https://www.inspq.qc.ca/mieux-vivre/consultez-le-guide",
    "base_url": "https://www.inspq.qc.ca",
    "max_concurrency": int(os.getenv("BEBE_CRAWL_CONCURRENCY", "25")),
    "request_timeout_s": float(os.getenv("BEBE_REQUEST_TIMEOUT", "20")),
    "delay_s": 0.0,
    "text_min_length": 42,
    "user_agent": "BebeAI/1.0 (mieux-vivre crawler)",
}

SELECTORS = {
    "section_card": ".carte-lien-mv",
    "section_menu": "#block-mieuxvivre-post-content-menu .menu",
    "content": ".two-column-layout__left .field__item",
    "title": "h1",
}

EMBEDDING = {
    "model": "models/text-embedding-004",
    "endpoint": os.getenv(
        "GEMINI_EMBEDDINGS_URL",
        "https://generativelanguage.googleapis.com/v1beta/models/text-embedding-004",
    ),
    # batchEmbedContents accepts at most 100 requests per call.
    "batch_size": 100,
    "rpm_limit": int(os.getenv("GEMINI_EMBED_RPM", "1500")),
    "max_retries": 6,
}

RETRIEVAL = {
    "top_k": 5,
}

STORAGE = {
    "chunks_path": "chunks.json",
    "embedded_path": "embedded.json",
    "log_path": os.getenv("BEBE_LOG_FILE", "bebe-ai.log"),
}
