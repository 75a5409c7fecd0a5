from pydantic_settings import BaseSettings, SettingsConfigDict

from flash_loan_sdk.constants import FLASH_LOAN_ID


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="FLASH_LOAN_", extra="ignore"
    )

    # Solana RPC
    rpc_url: str = "https://api.devnet.solana.com"
    commitment: str = "confirmed"
    rpc_timeout_sec: float = 15.0

    # Flash loan program (devnet deployment by default)
    program_id: str = FLASH_LOAN_ID

    # Signer for example scripts (Solana CLI keypair file)
    keypair_path: str = "~/.config/solana/id.json"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: str = ""  # e.g. "logs/flash_loan_{time:YYYY-MM-DD}.log"; empty = console only


settings = Settings()
