# listing_search/config/settings.py

"""Central configuration for the listing_search engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the listing_search engine."""

    # --- Catalog service ---
    CATALOG_API_URL: str = os.getenv(
        "CATALOG_API_URL", "http://localhost:5000/api"
    ).rstrip("/")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "15"))
    DEFAULT_SORT: str = "rank"

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
    }

    # --- Geographic scope ---
    DEFAULT_COUNTRY: str = os.getenv("DEFAULT_COUNTRY", "BR").upper()
    DEFAULT_BBOX_DELTA: float = 0.05    # Degrees around a point
    MIN_ZOOM_DELTA: float = 0.02        # Tightest radius at deep zoom
    ZOOM_DELTA_FACTOR: float = 0.003    # Degrees per zoom level
    GPS_TIMEOUT: float = 8.0            # Seconds to wait for a position fix

    # --- Matching ---
    SHORT_TOKEN_LENGTH: int = 4         # Query tokens up to this length...
    SHORT_TOKEN_TOLERANCE: int = 1      # ...allow this many edits
    LONG_TOKEN_TOLERANCE: int = 2
    FEW_RESULTS_THRESHOLD: int = 6      # Below this, supplement with fallback

    # --- Caching ---
    QUERY_CACHE_TTL: float = 10.0       # Broad fallback listing cache (secs)

    # --- Labels & user-facing messages ---
    NEAR_YOU_LABEL: str = "Perto de você"
    MAP_REGION_LABEL: str = "Região selecionada no mapa"
    MESSAGES: dict[str, str] = {
        "empty_query": "Digite algo para buscar.",
        "empty_address": "Digite um endereço ou cidade.",
        "invalid_bounds": "Região do mapa inválida.",
        "unknown_country": "País não reconhecido.",
        "empty_category": "Selecione uma categoria.",
        "location_not_found": "Endereço não encontrado.",
        "gps_unavailable": "Não foi possível obter o GPS.",
        "fetch_error": "Erro ao buscar produtos.",
        "no_text_results": "Nenhum produto corresponde à sua busca.",
        "no_region_results": "Nenhum produto encontrado nessa região.",
        "no_nearby_results": "Nenhum produto encontrado nos arredores.",
        "no_country_results": "Nenhum produto encontrado neste país.",
        "no_category_results": "Nenhum produto encontrado nesta categoria.",
        "no_results": "Nenhum produto encontrado.",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
