"""Format qualifying tokens into Telegram HTML messages.

Output depends only on the token and the evaluation instant, so the
same token formatted twice at the same time gives identical text.
"""

import html

from src.models.token import TokenRecord

PLACEHOLDER = "N/A"
UNKNOWN_NAME = "Unknown"
UNKNOWN_SYMBOL = "UNK"

# Telegram rejects longer messages
MAX_MESSAGE_LEN = 4096
MAX_DESCRIPTION_LEN = 300


def format_number(num: float) -> str:
    """Compact money amount: 1500 -> 1.50K, 2.3e6 -> 2.30M, 4.1e9 -> 4.10B."""
    if num >= 1e9:
        return f"{num / 1e9:.2f}B"
    if num >= 1e6:
        return f"{num / 1e6:.2f}M"
    if num >= 1e3:
        return f"{num / 1e3:.2f}K"
    return f"{num:.2f}"


def format_price(price: float | None) -> str:
    return f"${price:.8f}" if price else PLACEHOLDER


def token_links(mint: str) -> dict[str, str]:
    return {
        "DexScreener": f"https://dexscreener.com/solana/{mint}",
        "Solscan": f"https://solscan.io/token/{mint}",
        "Jupiter": f"https://jup.ag/swap/SOL-{mint}",
    }


def format_token_alert(token: TokenRecord, at_ms: int | None = None) -> str:
    """Render a new-token alert."""
    age = token.age_minutes(at_ms)
    risk_emoji = "⚠️" if token.risky else "✅"
    name = html.escape(token.name or UNKNOWN_NAME)
    symbol = html.escape(token.symbol or UNKNOWN_SYMBOL)
    holders = str(token.holders) if token.holders else PLACEHOLDER

    mint = html.escape(token.mint)
    links = "\n".join(
        f'• <a href="{html.escape(url, quote=True)}">{label}</a>'
        for label, url in token_links(token.mint).items()
    )

    lines = [
        f"🪙 <b>New Token Detected</b> {risk_emoji}",
        "",
        f"<b>{name}</b> ({symbol})",
        f"📍 <b>Address:</b> <code>{mint}</code>",
        f"💰 <b>Market Cap:</b> ${format_number(token.market_cap_usd)}",
        f"💧 <b>Liquidity:</b> ${format_number(token.liquidity_usd)}",
        f"📊 <b>Price:</b> {format_price(token.price_usd)}",
        f"👥 <b>Holders:</b> {holders}",
        f"⏰ <b>Age:</b> {age} minutes",
        "",
        "🔗 <b>Links:</b>",
        links,
    ]

    footer = f"#Solana #NewToken #{_hashtag(token.symbol)}"
    text = "\n".join(lines)
    if token.description:
        with_description = "\n".join(
            [text, "", f"📝 <b>Description:</b> {_description(token.description)}"]
        )
        if len(with_description) + len(footer) + 2 <= MAX_MESSAGE_LEN:
            text = with_description

    return f"{text}\n\n{footer}"


def _description(description: str) -> str:
    """Escaped description, cut to MAX_DESCRIPTION_LEN source characters."""
    if len(description) > MAX_DESCRIPTION_LEN:
        description = description[:MAX_DESCRIPTION_LEN].rstrip() + "…"
    return html.escape(description)


def _hashtag(symbol: str | None) -> str:
    """Telegram hashtags allow letters, digits and underscores only."""
    cleaned = "".join(ch for ch in (symbol or "") if ch.isalnum() or ch == "_")
    return cleaned or UNKNOWN_SYMBOL
