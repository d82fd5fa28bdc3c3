import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        "date_format": "%Y-%m-%d",
        "label.paid": "Support contract",
        "label.warranty": "Warranty",
        "label.warranty_support": "Warranty + Support",
        "label.warranty_only": "Warranty",
        "label.expired": "Expired",
        "label.none": "None",
        "remaining.expired": "Expired",
        "remaining.days": "{days} days left",
        "remaining.months": "{months} months {days} days left",
        "remaining.years": "{years} years {months} months left",
        "tooltip.paid": "Paid support until {end} ({remaining})",
        "tooltip.warranty": "Full support and warranty until {end} ({remaining})",
        "tooltip.warranty_only": "Hardware warranty only until {end} ({remaining}). Free support has ended.",
        "tooltip.expired": "Support and warranty have expired",
        "tooltip.none": "Support is not active or unknown",
    },
    "ru": {
        "date_format": "%d.%m.%Y",
        "label.paid": "Техподдержка",
        "label.warranty": "Гарантия",
        "label.warranty_support": "Гарантия + Подд.",
        "label.warranty_only": "Гарантия",
        "label.expired": "Истекла",
        "label.none": "Нет",
        "remaining.expired": "Истекла",
        "remaining.days": "Осталось {days} дн.",
        "remaining.months": "Осталось {months} мес. {days} дн.",
        "remaining.years": "Осталось {years} г. {months} мес.",
        "tooltip.paid": "Платная поддержка до {end} ({remaining})",
        "tooltip.warranty": "Полная поддержка и гарантия до {end} ({remaining})",
        "tooltip.warranty_only": "Только аппаратная гарантия до {end} ({remaining}). Бесплатная поддержка истекла.",
        "tooltip.expired": "Срок поддержки и гарантии истек",
        "tooltip.none": "Поддержка не активна/не известна",
    },
}


def catalog(locale: Optional[str] = None) -> Dict[str, str]:
    """Message catalog for a locale; unknown locales fall back to English."""
    key = (locale or DEFAULT_LOCALE).strip().lower()
    if key not in CATALOGS:
        logger.debug("Unknown locale %r, using %s", locale, DEFAULT_LOCALE)
        key = DEFAULT_LOCALE
    return CATALOGS[key]
