from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Единственный владелец, которому разрешён розыгрыш (base58)
    OWNER: str = "DGErPxhvoWWVVKZ6Jh47cGtHUstQBgtCHG3WEEig7LEZ"
    # Пространство имён программы: входит в энтропию и в ключ записи
    PROGRAM_ID: str = "7abh1utsEzyXGPaA5ngBgnuj3PXRuzwtRM7ngEvUhrPG"
    RESULT_SEED: str = "lottery_result"

    MAX_REJECTIONS: int = 32

    # solana = слот/время/blockhash из RPC, local = локальные часы + jitter
    ENTROPY_SOURCE: Literal["solana", "local"] = "solana"
    SOLANA_RPC_URL: str = "https://api.mainnet-beta.solana.com"
    RPC_TIMEOUT: float = 15.0

    # пусто = держим результаты в памяти
    STORE_DIR: str = "./storage/results"
    LOG_LEVEL: str = "INFO"

settings = Settings()
