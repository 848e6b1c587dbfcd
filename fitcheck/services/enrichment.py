"""Waterfall company enrichment.

Sources are tried in priority order (LinkedIn, Crunchbase, the company
website) through the Firecrawl search and scrape API, then the model
synthesises whatever was collected into one company profile.
"""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from fitcheck.core.cache import CacheService
from fitcheck.core.config import settings
from fitcheck.core.exceptions import EnrichmentError, InvalidRequestError
from fitcheck.services.ai_gateway import AIGatewayClient

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 100
SOURCE_CONTENT_LIMIT = 4000
RAW_CONTENT_LIMIT = 3000

SYNTHESIS_PROMPT = """You are a B2B company research analyst performing waterfall data enrichment. You have data from multiple sources (LinkedIn, Crunchbase, company website). Synthesize ALL sources to extract the most accurate and complete company profile.

PRIORITIZATION RULES:
- LinkedIn: Best for company size, employee count, industry classification
- Crunchbase: Best for funding stage, revenue signals, founding date, investors
- Website: Best for product description, tech stack, current messaging

Cross-reference sources when possible. If sources conflict, prefer LinkedIn > Crunchbase > Website for factual data.

Respond ONLY with valid JSON:
{
  "companyName": "Official Company Name",
  "description": "One clear sentence about what they do and who they serve",
  "industry": "Primary industry (e.g., B2B SaaS, FinTech, DevTools, MarTech)",
  "companySize": "Employee count (e.g., '150 employees' or '50-100 employees')",
  "estimatedRevenue": "Revenue estimate with reasoning (e.g., '$10-25M ARR' or 'Series A, likely $2-5M ARR')",
  "fundingStage": "Most recent funding (e.g., 'Series B ($45M)' or 'Bootstrapped')",
  "techStack": ["Technology1", "Technology2", "Technology3"],
  "region": "Headquarters location (e.g., 'San Francisco, CA, USA')"
}"""


def normalize_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def extract_domain(url: str) -> str:
    hostname = urlparse(normalize_url(url)).hostname
    if hostname:
        return hostname.replace("www.", "", 1)
    return re.sub(r"^(https?://)?(www\.)?", "", url).split("/")[0]


def company_name_from_domain(domain: str) -> str:
    """``acme-widgets.io`` -> ``Acme Widgets``."""
    stem = domain.split(".")[0].replace("-", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), stem)


class FirecrawlClient:
    """Search and scrape through Firecrawl; failures return ``None``."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.FIRECRAWL_API_KEY
        self._base_url = (base_url or settings.FIRECRAWL_API_URL).rstrip("/")
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _post(self, path: str, body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self._base_url}{path}"
        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
                    response = await client.post(url, json=body, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.info("Firecrawl %s failed: %s", path, exc.response.status_code)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Firecrawl %s error: %s", path, exc)
        return None

    async def search_company_page(self, company_name: str, site: str) -> Optional[str]:
        """Best matching page on *site*, preferring company/organization pages."""
        logger.info("Searching %s for: %s", site, company_name)
        data = await self._post(
            "/search", {"query": f'site:{site} "{company_name}" company', "limit": 3}
        )
        results = [r for r in (data or {}).get("data") or [] if r.get("url")]
        if not results:
            return None
        for result in results:
            if "/company/" in result["url"] or "/organization/" in result["url"]:
                return result["url"]
        return results[0]["url"]

    async def scrape(self, url: str) -> Optional[Dict[str, Any]]:
        """Scrape *url* to markdown; pages under 100 characters count as failures."""
        logger.info("Scraping: %s", url)
        data = await self._post(
            "/scrape",
            {"url": url, "formats": ["markdown"], "onlyMainContent": True, "waitFor": 3000},
        )
        if data is None:
            return None
        inner = data.get("data") or {}
        markdown = inner.get("markdown") or data.get("markdown") or ""
        metadata = inner.get("metadata") or data.get("metadata") or {}
        if len(markdown) < MIN_CONTENT_LENGTH:
            logger.info("Scrape returned insufficient content: %d chars", len(markdown))
            return None
        return {"markdown": markdown, "metadata": metadata}


class EnrichmentService:
    def __init__(
        self,
        firecrawl: FirecrawlClient,
        gateway: AIGatewayClient,
        cache: Optional[CacheService] = None,
        request_delay_seconds: Optional[float] = None,
    ) -> None:
        self._firecrawl = firecrawl
        self._gateway = gateway
        self._cache = cache or CacheService()
        self._delay = (
            request_delay_seconds
            if request_delay_seconds is not None
            else settings.ENRICHMENT_REQUEST_DELAY_SECONDS
        )

    async def _pause(self) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)

    async def _from_directory(self, company_name: str, site: str, label: str) -> Optional[Dict[str, Any]]:
        page_url = await self._firecrawl.search_company_page(company_name, site)
        if page_url is None:
            return None
        await self._pause()
        scraped = await self._firecrawl.scrape(page_url)
        if scraped is None:
            return None
        return {"name": label, "content": scraped["markdown"], "metadata": scraped["metadata"]}

    async def gather_sources(self, website: str, company_name: str) -> List[Dict[str, Any]]:
        """Run the waterfall sequentially, pausing between requests."""
        sources: List[Dict[str, Any]] = []

        linkedin = await self._from_directory(company_name, "linkedin.com", "LinkedIn")
        if linkedin:
            sources.append(linkedin)
        await self._pause()

        crunchbase = await self._from_directory(company_name, "crunchbase.com", "Crunchbase")
        if crunchbase:
            sources.append(crunchbase)
        await self._pause()

        site = await self._firecrawl.scrape(website)
        if site:
            sources.append({"name": "Website", "content": site["markdown"], "metadata": site["metadata"]})
        return sources

    async def enrich(self, url: str) -> Dict[str, Any]:
        """Return an ``EnrichedCompany`` dict for *url*, cached per domain."""
        if not url or not url.strip():
            raise InvalidRequestError("URL is required")
        if not self._firecrawl.is_configured:
            raise EnrichmentError("FIRECRAWL_API_KEY is not configured")

        website = normalize_url(url)
        domain = extract_domain(website)
        cached = await self._cache.get_enriched_company(domain)
        if cached is not None:
            logger.info("Enrichment cache hit for %s", domain)
            return cached

        company_name = company_name_from_domain(domain)
        logger.info("Waterfall enrichment start: %s (%s)", company_name, domain)
        sources = await self.gather_sources(website, company_name)
        if not sources:
            raise EnrichmentError()
        logger.info("Sources collected: %s", ", ".join(s["name"] for s in sources))

        combined = "\n\n".join(
            f"=== {s['name'].upper()} ===\n{s['content'][:SOURCE_CONTENT_LIMIT]}"
            for s in sources
        )
        user_prompt = f"""Synthesize company data from these {len(sources)} sources:

COMPANY DOMAIN: {domain}

{combined}

Extract the most complete and accurate company profile by combining insights from all sources."""

        parsed = await self._gateway.complete_json(SYNTHESIS_PROMPT, user_prompt, temperature=0.2)
        if not isinstance(parsed, dict):
            raise EnrichmentError("Failed to extract company data from AI response")

        tech_stack = parsed.get("techStack")
        enriched = {
            "company_name": parsed.get("companyName") or company_name,
            "description": parsed.get("description") or "",
            "industry": parsed.get("industry") or "Unknown",
            "company_size": parsed.get("companySize") or "Unknown",
            "estimated_revenue": parsed.get("estimatedRevenue") or "Unknown",
            "funding_stage": parsed.get("fundingStage") or "Unknown",
            "tech_stack": [str(t) for t in tech_stack] if isinstance(tech_stack, list) else [],
            "region": parsed.get("region") or "Unknown",
            "website": website,
            "raw_content": combined[:RAW_CONTENT_LIMIT],
            "data_sources": [s["name"] for s in sources],
        }
        await self._cache.set_enriched_company(domain, enriched)
        logger.info("Waterfall enrichment complete: %s", enriched["company_name"])
        return enriched
