# listing_search/data/countries.py

"""Supported marketplace countries with display labels and aliases."""

from listing_search.filters.text_normalizer import normalize

# (ISO alpha-2, Portuguese label, aliases)
COUNTRIES: list[tuple[str, str, tuple[str, ...]]] = [
    ("BR", "Brasil", ("Brazil",)),
    ("PT", "Portugal", ()),
    ("AO", "Angola", ()),
    ("MZ", "Moçambique", ("Mozambique",)),
    ("CV", "Cabo Verde", ("Cape Verde",)),
    ("GW", "Guiné-Bissau", ("Guinea-Bissau", "Guine Bissau")),
    ("ST", "São Tomé e Príncipe", ("Sao Tome and Principe",)),
    ("TL", "Timor-Leste", ("East Timor", "Timor Leste")),
    ("DE", "Alemanha", ("Germany", "Alemania")),
    ("AT", "Áustria", ("Austria",)),
    ("LI", "Liechtenstein", ()),
    ("US", "Estados Unidos", ("USA", "United States", "EUA")),
    ("CA", "Canadá", ("Canada",)),
    ("GB", "Reino Unido", ("United Kingdom", "UK", "Inglaterra", "England")),
    ("IE", "Irlanda", ("Ireland",)),
    ("AU", "Austrália", ("Australia",)),
    ("NZ", "Nova Zelândia", ("New Zealand",)),
    ("ZA", "África do Sul", ("South Africa",)),
    ("NG", "Nigéria", ("Nigeria",)),
    ("KE", "Quênia", ("Kenya",)),
    ("PH", "Filipinas", ("Philippines",)),
    ("SG", "Singapura", ("Singapore",)),
    ("IN", "Índia", ("India",)),
    ("JP", "Japão", ("Japan", "Japao")),
    ("CN", "China", ("Chine",)),
    ("TW", "Taiwan", ()),
    ("HK", "Hong Kong", ("Hongkong",)),
    ("MO", "Macau", ("Macao",)),
    ("ES", "Espanha", ("Spain",)),
    ("AR", "Argentina", ()),
    ("BO", "Bolívia", ("Bolivia",)),
    ("CL", "Chile", ()),
    ("CO", "Colômbia", ("Colombia",)),
    ("CR", "Costa Rica", ()),
    ("CU", "Cuba", ()),
    ("DO", "República Dominicana", ("Dominican Republic",)),
    ("EC", "Equador", ("Ecuador",)),
    ("SV", "El Salvador", ()),
    ("GT", "Guatemala", ()),
    ("HN", "Honduras", ()),
    ("MX", "México", ("Mexico",)),
    ("NI", "Nicarágua", ("Nicaragua",)),
    ("PA", "Panamá", ("Panama",)),
    ("PY", "Paraguai", ("Paraguay",)),
    ("PE", "Peru", ()),
    ("PR", "Porto Rico", ("Puerto Rico",)),
    ("UY", "Uruguai", ("Uruguay",)),
    ("VE", "Venezuela", ()),
    ("IT", "Itália", ("Italia", "Italy")),
    ("SM", "San Marino", ()),
    ("VA", "Vaticano", ("Vatican", "Holy See")),
    ("CH", "Suíça", ("Switzerland",)),
]

_LABELS: dict[str, str] = {code: label for code, label, _ in COUNTRIES}

_ALIASES: dict[str, str] = {}
for _code, _label, _aliases in COUNTRIES:
    _ALIASES[normalize(_label)] = _code
    for _alias in _aliases:
        _ALIASES[normalize(_alias)] = _code


def normalize_country_code(value: str | None) -> str:
    """Resolve an ISO code, label or alias to an ISO code ("" if unknown).

    Any two-letter alphabetic input is taken as an ISO alpha-2 code, so
    countries missing from the table still resolve; the table is only
    needed to turn names into codes.
    """
    if not value:
        return ""
    upper = str(value).strip().upper()
    if upper in _LABELS:
        return upper
    alias = _ALIASES.get(normalize(value))
    if alias:
        return alias
    if len(upper) == 2 and upper.isascii() and upper.isalpha():
        return upper
    return ""


def get_country_label(code: str | None) -> str:
    """Portuguese display label for a supported code, else ""."""
    if not code:
        return ""
    return _LABELS.get(str(code).strip().upper(), "")
