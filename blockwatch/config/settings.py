from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)
    
    # Ethereum JSON-RPC endpoint
    eth_url: str = Field(
        default="https://cloudflare-eth.com",
        description="Ethereum-compatible JSON-RPC endpoint URL"
    )
    rpc_timeout_seconds: float = Field(5.0, description="Total timeout for a single RPC round trip")
    
    # HTTP API
    server_host: str = Field("0.0.0.0", description="Interface the HTTP API binds to")
    server_port: int = Field(8080, description="Port the HTTP API listens on")
    shutdown_timeout_seconds: float = Field(5.0, description="Grace period for in-flight requests on shutdown")
    
    # Logging
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("json", description="Log format (json or plain)")
    
    @validator("eth_url")
    def validate_eth_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("ETH_URL must be an http(s) URL")
        return v
    
    @validator("rpc_timeout_seconds")
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("RPC timeout must be positive")
        return v
    
    @validator("log_format")
    def validate_log_format(cls, v):
        if v not in ("json", "plain"):
            raise ValueError("Log format must be 'json' or 'plain'")
        return v


settings = Settings()
