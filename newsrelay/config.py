from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Search provider
    search_provider: str = "google_cse"  # google_cse | brave | tavily | openrouter | anthropic
    provider_timeout_seconds: float = 30.0

    # Google Custom Search
    google_api_key: str = ""
    search_engine_id: str = ""
    google_date_restrict: str = "d7"
    google_language: str = "lang_ja"
    google_sort: str = "date"

    # Brave / Tavily
    brave_api_key: str = ""
    brave_freshness: str = "pw"
    tavily_api_key: str = ""

    # OpenRouter (generation provider)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = ""
    default_model: str = "openai/gpt-4o-mini"
    web_search_max_results: int = 8

    # Anthropic (generation provider)
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    anthropic_web_search_max_uses: int = 5
    generation_max_tokens: int = 2048

    # Collection
    collection_topics: list[str] = [
        "VTuber オーディション 募集",
        "YouTube 仕様変更 最新",
        "X Twitter 仕様変更 配信者",
        "VTuber 活動 ノウハウ",
        "VTuber デビュー 方法",
    ]
    collection_domain: str = "VTuber活動に役立つ最新情報（オーディション、YouTube・Xの仕様変更、活動ノウハウ、デビュー方法）"
    consolidated_count: int = 5
    consolidated_source_label: str = "AI web search"
    request_delay_seconds: float = 1.0

    # Link validation
    link_validation_enabled: bool = True
    link_check_timeout_seconds: float = 6.0
    link_check_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    # Sessions
    session_window_seconds: float = 60.0

    # Broadcast (Discord webhooks)
    send_delay_seconds: float = 0.5
    notifier_timeout_seconds: float = 15.0
    embed_color: int = 5814783
    embed_footer_text: str = "WannaV お役立ち情報"
    embed_query_label: str = "検索クエリ"
    embed_collected_label: str = "収集日時"
    display_timezone: str = "Asia/Tokyo"

    # Storage
    store_backend: str = "supabase"  # supabase | memory
    supabase_url: str = ""
    supabase_anon_key: str = ""
    items_table: str = "collected_items"
    recipients_table: str = "recipients"
    recipient_active_status: str = "アクティブ"
    recipient_webhooks: str = ""  # memory backend only, comma-separated

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def recipient_webhook_list(self) -> list[str]:
        return [w.strip() for w in self.recipient_webhooks.split(",") if w.strip()]


settings = Settings()
