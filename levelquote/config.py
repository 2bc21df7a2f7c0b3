from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./levelquote.db"
    LOG_LEVEL: str = "INFO"

    # Document numbering: INV-0001, EST-0001
    INVOICE_PREFIX: str = "INV"
    ESTIMATE_PREFIX: str = "EST"
    NUMBER_PADDING: int = 4

    # Ohio sales tax as used on every invoice/estimate unless overridden
    TAX_RATE: float = 0.0825
    INVOICE_DUE_DAYS: int = 30
    ESTIMATE_VALID_DAYS: int = 30

    # Letterheads, one per business line
    CONCRETE_COMPANY_NAME: str = "Superior Concrete Leveling LLC"
    CONCRETE_COMPANY_WEBSITE: str = "superiorconcrete.com"
    MASONRY_COMPANY_NAME: str = "J. Stark Masonry & Construction LLC"
    MASONRY_COMPANY_WEBSITE: str = "jstarkmasonry.com"
    COMPANY_ADDRESS: str = "4373 N Myers Rd, Geneva, OH 44041"
    COMPANY_PHONE: str = "(440) 415-2534"
    COMPANY_EMAIL: str = ""

    class Config:
        env_file = ".env"


settings = Settings()


def company_info(business_type: str) -> dict:
    """Letterhead fields for a business line. Unknown types get the concrete letterhead."""
    if business_type == "masonry":
        name = settings.MASONRY_COMPANY_NAME
        website = settings.MASONRY_COMPANY_WEBSITE
    else:
        name = settings.CONCRETE_COMPANY_NAME
        website = settings.CONCRETE_COMPANY_WEBSITE
    return {
        "name": name,
        "address": settings.COMPANY_ADDRESS,
        "phone": settings.COMPANY_PHONE,
        "email": settings.COMPANY_EMAIL,
        "website": website,
    }
