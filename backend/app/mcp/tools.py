from fastmcp import FastMCP

from app.schemas import DomainStateResponse, TokenResponse, TokenPartsResponse
from app.services.domain import InvalidDomainError, normalize_domain as normalize_domain_value
from app.services.generator import current_millis
from app.services.randomness import RandomnessUnavailableError
from app.services.tiers import SecurityTier, config_for, tier_for_prefix
from app.services.token_assembler import (
    InvalidTokenError,
    TierConfigurationError,
    assemble_token,
    parse_token,
)

# Tools are stateless: a history here would be shared by every MCP client.
mcp = FastMCP("API Key Generator")


@mcp.tool()
async def normalize_domain(value: str) -> DomainStateResponse:
    """
    Validate a domain or URL and reduce it to its bare hostname.

    Scheme-less input is treated as https. Scheme, port, credentials, path,
    query and fragment are dropped. An empty value is valid but cannot be
    used to generate a key.

    Args:
        value: A hostname (example.com) or URL (https://shop.example.com/path)

    Returns:
        The normalized hostname and whether a key can be generated for it
    """
    try:
        domain = normalize_domain_value(value)
    except InvalidDomainError as e:
        return DomainStateResponse(
            input=value, domain="", valid=False, generateable=False, error=str(e)
        )
    return DomainStateResponse(
        input=value, domain=domain, valid=True, generateable=bool(domain)
    )


@mcp.tool()
async def generate_api_key(domain: str, tier: str = "standard") -> TokenResponse | str:
    """
    Generate a domain-bound API key.

    Standard keys look like sk_<fingerprint>_<random> and are 32 characters;
    high keys use the sk_live_ prefix and are 64 characters. The 8-character
    fingerprint is derived from the domain and the issue time and is not
    secret. Keys are not stored anywhere.

    Args:
        domain: Hostname or URL the key is issued for
        tier: "standard" or "high"

    Returns:
        The generated key and its parts, or an error description
    """
    try:
        security_tier = SecurityTier(tier.lower())
    except ValueError:
        return f"Error: unknown tier '{tier}' (use 'standard' or 'high')"

    try:
        hostname = normalize_domain_value(domain)
    except InvalidDomainError as e:
        return f"Validation error: {e}"
    if not hostname:
        return "Validation error: a domain is required"

    try:
        token = assemble_token(config_for(security_tier), hostname, current_millis())
    except RandomnessUnavailableError:
        return "Error: secure random source unavailable; no key was generated"
    except TierConfigurationError as e:
        return f"Error: {e}"

    return TokenResponse(
        token=token.full_string,
        domain=hostname,
        tier=security_tier,
        prefix=token.prefix,
        fingerprint=token.fingerprint,
        length=len(token.full_string),
    )


@mcp.tool()
async def describe_api_key(token: str) -> TokenPartsResponse | str:
    """
    Split an API key into its prefix, fingerprint and random suffix.

    This only checks the key's format. It cannot tell whether a key was
    really issued by this generator.

    Args:
        token: A key such as sk_ZXhhbXBs_...

    Returns:
        The key's parts and tier, or an error description
    """
    try:
        parsed = parse_token(token)
    except InvalidTokenError as e:
        return f"Invalid key: {e}"

    return TokenPartsResponse(
        token=parsed.full_string,
        tier=tier_for_prefix(parsed.prefix),
        prefix=parsed.prefix,
        fingerprint=parsed.fingerprint,
        random_suffix=parsed.random_suffix,
        length=len(parsed.full_string),
    )
