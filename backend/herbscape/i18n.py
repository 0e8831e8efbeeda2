"""
HerbScape Backend — UI String Catalog
=======================================

What:  Interface strings per locale, looked up by key.
How:   Missing keys fall back to the default locale, then to the key itself
       (category names without an entry are shown as stored).
Who:   Templates (through the `t` global) and CatalogPage (locale names).

Herb records themselves are not translated here; see
CatalogPage.translate_herbs() and the translate-plant function.
"""

from typing import Dict

from herbscape.config import settings

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "hi": "हिन्दी",
    "mr": "मराठी",
}

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "title": "HerbScape",
        "subtitle": "Discover the healing power of herbs and plants",
        "search": "Search herbs...",
        "category": "Category",
        "all": "All",
        "medicinal": "Medicinal",
        "culinary": "Culinary",
        "aromatic": "Aromatic",
        "sign_in": "Sign In",
        "sign_out": "Sign Out",
        "add_plant": "Add Plant",
        "scan": "Scan",
        "plant_scanner": "Plant Scanner",
        "scanner_description": "AI-powered plant identification",
        "identifying": "Identifying plant...",
        "common_names": "Common names",
        "confidence": "Confidence",
        "family": "Family",
        "genus": "Genus",
        "description": "Description",
        "benefits": "Benefits",
        "no_herbs": "No herbs match your search.",
        "translating": "Translating herbs... refresh to see them in your language.",
    },
    "hi": {
        "title": "हर्बस्केप",
        "subtitle": "जड़ी-बूटियों और पौधों की उपचार शक्ति को जानें",
        "search": "जड़ी-बूटियाँ खोजें...",
        "category": "श्रेणी",
        "all": "सभी",
        "medicinal": "औषधीय",
        "culinary": "पाक",
        "aromatic": "सुगंधित",
        "sign_in": "साइन इन",
        "sign_out": "साइन आउट",
        "add_plant": "पौधा जोड़ें",
        "scan": "स्कैन",
        "plant_scanner": "पौधा स्कैनर",
        "identifying": "पौधे की पहचान हो रही है...",
        "benefits": "लाभ",
        "no_herbs": "आपकी खोज से कोई जड़ी-बूटी मेल नहीं खाती।",
        "translating": "जड़ी-बूटियों का अनुवाद हो रहा है...",
    },
    "mr": {
        "title": "हर्बस्केप",
        "subtitle": "वनौषधी आणि वनस्पतींची उपचार शक्ती जाणून घ्या",
        "search": "वनौषधी शोधा...",
        "category": "वर्ग",
        "all": "सर्व",
        "medicinal": "औषधी",
        "culinary": "पाककृती",
        "aromatic": "सुगंधी",
        "sign_in": "साइन इन",
        "sign_out": "साइन आउट",
        "add_plant": "वनस्पती जोडा",
        "scan": "स्कॅन",
        "plant_scanner": "वनस्पती स्कॅनर",
        "identifying": "वनस्पती ओळखत आहे...",
        "benefits": "फायदे",
        "no_herbs": "तुमच्या शोधाशी जुळणारी वनौषधी नाही.",
        "translating": "वनौषधींचे भाषांतर होत आहे...",
    },
}


def translate(key: str, locale: str) -> str:
    """Look up `key` for `locale`, falling back to the default locale, then the key."""
    if key in MESSAGES.get(locale, {}):
        return MESSAGES[locale][key]
    return MESSAGES.get(settings.default_locale, {}).get(key, key)


def language_name(locale: str) -> str:
    return LANGUAGE_NAMES.get(locale, locale)
