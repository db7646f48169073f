"""Per-domain extraction rules and the settings source that can override them.

Rules come from two places: built-in code rules registered at construction
and user rules (validated against ``SITE_RULE_SCHEMA``) that replace a code
rule for the same domain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple

import jsonschema

logger = logging.getLogger(__name__)

WILDCARD_DOMAIN = "*"

# Specificity scores for settings-level site rule matching.
_EXACT_MATCH_PRIORITY = 1000
_SUBDOMAIN_MATCH_PRIORITY = 500

SITE_RULE_SCHEMA = {
    "type": "object",
    "properties": {
        "domain": {"type": "string", "minLength": 1},
        "titleSelector": {"type": "string"},
        "descriptionSelector": {"type": "string"},
        "dateSelector": {"type": "string"},
        "locationSelector": {"type": "string"},
        "priceSelector": {"type": "string"},
        "ignoreSelector": {"type": "string"},
        "priority": {"type": "integer", "minimum": 0},
        "extractorModule": {"type": "string"},
        "enabled": {"type": "boolean"},
        "inheritSubdomains": {"type": "boolean"},
        "includeURL": {"type": ["boolean", "string"]},
    },
    "required": ["domain"],
    "additionalProperties": False,
}

_CAMEL_TO_FIELD = {
    "domain": "domain",
    "titleSelector": "title_selector",
    "descriptionSelector": "description_selector",
    "dateSelector": "date_selector",
    "locationSelector": "location_selector",
    "priceSelector": "price_selector",
    "ignoreSelector": "ignore_selector",
    "priority": "priority",
    "extractorModule": "extractor_module",
    "enabled": "enabled",
    "inheritSubdomains": "inherit_subdomains",
    "includeURL": "include_url",
}


@dataclass(frozen=True)
class ExtractorRule:
    domain: str
    title_selector: str | None = None
    description_selector: str | None = None
    date_selector: str | None = None
    location_selector: str | None = None
    price_selector: str | None = None
    ignore_selector: str | None = None
    priority: int = 0
    extractor_module: str | None = None
    enabled: bool = True
    inherit_subdomains: bool = True
    include_url: bool | None = None
    source: str = "code"

    @classmethod
    def from_dict(cls, data: Dict, *, source: str = "ui") -> "ExtractorRule":
        """Build a rule from its camel-cased settings form.

        Raises:
            ValueError: If the dictionary does not match SITE_RULE_SCHEMA
        """
        is_valid, errors = validate_site_rule(data)
        if not is_valid:
            raise ValueError(f"Invalid site rule: {'; '.join(errors or [])}")

        kwargs = {_CAMEL_TO_FIELD[key]: value for key, value in data.items()}
        # "inherit" means: use the global setting
        if isinstance(kwargs.get("include_url"), str):
            kwargs["include_url"] = None
        kwargs["domain"] = normalize_domain(kwargs["domain"])
        return cls(source=source, **kwargs)


def validate_site_rule(data: Dict) -> Tuple[bool, Optional[List[str]]]:
    """
    Validate a site rule dictionary against SITE_RULE_SCHEMA.

    Returns:
        Tuple of (is_valid, errors)
    """
    try:
        jsonschema.validate(instance=data, schema=SITE_RULE_SCHEMA)
        return (True, None)
    except jsonschema.ValidationError as e:
        return (False, [e.message])
    except jsonschema.SchemaError as e:
        return (False, [f"Invalid schema: {e.message}"])


def normalize_domain(domain: str | None) -> str:
    if not domain or domain == WILDCARD_DOMAIN:
        return domain or ""
    domain = domain.strip().lower()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


BUILTIN_RULES: tuple[ExtractorRule, ...] = (
    ExtractorRule(
        domain="eventbrite.com",
        priority=10,
        title_selector='.event-title, .event-card__title, h1[data-automation-id="event-title"]',
        description_selector=".event-description, .event-card__description, .structured-content",
        date_selector='.event-details__data, .date-info, [data-automation-id="event-start-date"]',
        location_selector=".venue-info, .event-details__data--location",
        price_selector=".event-card__price, .conversion-bar__panel-info",
        ignore_selector=".advertisement, .ads, .footer, .header-nav",
        extractor_module="eventbrite",
    ),
    ExtractorRule(
        domain="amazon.co.jp",
        priority=8,
        title_selector="#productTitle, .product-title",
        description_selector="#feature-bullets ul, .a-unordered-list .a-list-item",
        date_selector="#availability .a-color-success, #delivery-block",
        price_selector=".a-price-whole, .a-offscreen",
        ignore_selector=".nav-search-bar, .nav-footer, .a-popover",
        extractor_module="amazon",
    ),
    ExtractorRule(
        domain="rakuten.co.jp",
        priority=8,
        title_selector=".item-name, .event-title, h1",
        description_selector=".item-desc, .event-description",
        date_selector=".delivery-date, .event-date, .date-info",
        price_selector=".price, .event-price",
        ignore_selector=".header, .footer, .side-navi, .advertisement",
        extractor_module="selectors",
    ),
    ExtractorRule(
        domain="youtube.com",
        priority=7,
        title_selector="#title h1, .ytd-video-primary-info-renderer h1",
        description_selector="#description-text, .ytd-video-secondary-info-renderer #description",
        date_selector="#info-text span, .ytd-video-primary-info-renderer #info-text",
        ignore_selector=".ytd-comments, .ytd-watch-next-secondary-results-renderer",
        extractor_module="selectors",
    ),
    ExtractorRule(
        domain="twitter.com",
        priority=7,
        title_selector='[data-testid="tweetText"]',
        description_selector='[data-testid="tweetText"]',
        date_selector="time",
        ignore_selector='[data-testid="sidebarColumn"], [data-testid="bottomBar"]',
        extractor_module="selectors",
    ),
    ExtractorRule(
        domain="tokyo-dome.co.jp",
        priority=9,
        extractor_module="tokyo_dome_hall",
    ),
    ExtractorRule(
        domain="njpw.co.jp",
        priority=9,
        extractor_module="njpw_schedule",
    ),
    ExtractorRule(
        domain="wwr-stardom.com",
        priority=9,
        extractor_module="stardom_month",
    ),
    ExtractorRule(
        domain=WILDCARD_DOMAIN,
        priority=1,
        title_selector="h1, h2, .title, .event-title, .product-title, article h1, article h2",
        description_selector=".description, .content, .event-description, .summary, article p",
        date_selector=".date, .datetime, .event-date, .delivery-date, time, .schedule-date",
        location_selector=".location, .venue, .address, .place",
        price_selector=".price, .cost, .fee, .amount",
        ignore_selector="nav, footer, aside, .sidebar, .advertisement, .ads, .header",
        extractor_module="general",
    ),
)


class SiteRuleManager:
    """Holds code and user rules and answers "which rule applies to this domain"."""

    def __init__(self, rules: tuple[ExtractorRule, ...] = BUILTIN_RULES):
        self._code_rules: Dict[str, ExtractorRule] = {}
        self._ui_rules: Dict[str, ExtractorRule] = {}
        for rule in rules:
            self.add_code_rule(rule)

    def add_code_rule(self, rule: ExtractorRule) -> None:
        self._code_rules[normalize_domain(rule.domain)] = rule

    def add_ui_rule(self, data: Dict) -> ExtractorRule:
        """Validate and register a user rule; it replaces any code rule for the domain."""
        rule = ExtractorRule.from_dict(data, source="ui")
        self._ui_rules[rule.domain] = rule
        logger.info("Site rule added for %s", rule.domain)
        return rule

    def remove_rule(self, domain: str, source: str = "ui") -> bool:
        rules = self._ui_rules if source == "ui" else self._code_rules
        return rules.pop(normalize_domain(domain), None) is not None

    def _merged(self) -> Dict[str, ExtractorRule]:
        merged = dict(self._code_rules)
        merged.update(self._ui_rules)
        return merged

    def get_rule_for_domain(self, domain: str) -> ExtractorRule | None:
        """Exact domain first, then parent domains that allow inheritance, then the wildcard."""
        rules = self._merged()
        normalized = normalize_domain(domain)

        rule = rules.get(normalized)
        if rule is not None and rule.enabled:
            return rule

        parts = normalized.split(".")
        for i in range(1, len(parts)):
            rule = rules.get(".".join(parts[i:]))
            if rule is not None and rule.enabled and rule.inherit_subdomains:
                return rule

        rule = rules.get(WILDCARD_DOMAIN)
        if rule is not None and rule.enabled:
            return rule
        return None

    def get_all_rules(self) -> List[ExtractorRule]:
        return sorted(self._merged().values(), key=lambda r: r.priority, reverse=True)

    def has_rule(self, domain: str) -> bool:
        return self.get_rule_for_domain(domain) is not None


@dataclass(frozen=True)
class EffectiveSettings:
    rules_enabled: bool = True
    include_url: bool | None = None
    site_rule: ExtractorRule | None = None


class SettingsSource(Protocol):
    """Asynchronous source of per-host settings."""

    async def get_effective_settings(self, host: str) -> EffectiveSettings:
        ...


def find_best_matching_site_rule(host: str, site_rules: Dict[str, ExtractorRule]) -> ExtractorRule | None:
    """Exact host beats any parent domain; deeper parents beat shallower ones."""
    host = normalize_domain(host)
    candidates: list[tuple[int, ExtractorRule]] = []

    if host in site_rules:
        candidates.append((_EXACT_MATCH_PRIORITY, site_rules[host]))

    for domain, rule in site_rules.items():
        if domain == host:
            continue
        if rule.inherit_subdomains and host.endswith("." + domain):
            depth = len(host.split(".")) - len(domain.split("."))
            candidates.append((_SUBDOMAIN_MATCH_PRIORITY - depth, rule))

    if not candidates:
        return None
    candidates.sort(key=lambda c: c[0], reverse=True)
    return candidates[0][1]


@dataclass
class StaticSettingsSource:
    """In-memory settings: a global switch plus user site rules keyed by domain."""
    rules_enabled: bool = True
    include_url: bool | None = None
    site_rules: Dict[str, ExtractorRule] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict) -> "StaticSettingsSource":
        """Load from the settings form ``{"rulesEnabled": ..., "siteRules": {domain: rule}}``."""
        rules = {}
        for domain, rule_data in (data.get("siteRules") or {}).items():
            rule = ExtractorRule.from_dict({"domain": domain, **rule_data})
            rules[rule.domain] = rule
        return cls(
            rules_enabled=bool(data.get("rulesEnabled", True)),
            include_url=data.get("includeURL"),
            site_rules=rules,
        )

    async def get_effective_settings(self, host: str) -> EffectiveSettings:
        if not self.rules_enabled or not self.site_rules:
            return EffectiveSettings(rules_enabled=self.rules_enabled, include_url=self.include_url)

        rule = find_best_matching_site_rule(host, self.site_rules)
        if rule is None or not rule.enabled:
            return EffectiveSettings(rules_enabled=True, include_url=self.include_url)

        include_url = rule.include_url if rule.include_url is not None else self.include_url
        return EffectiveSettings(rules_enabled=True, include_url=include_url, site_rule=rule)
