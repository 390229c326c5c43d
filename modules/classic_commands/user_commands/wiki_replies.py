"""
Templates de réponse pour /wiki et les liens [[...]].
"""

DEFAULT_WIKI_NAME = "HighSpell Wiki"

# Discord refuse les messages de plus de 2000 caractères
MAX_MESSAGE_LENGTH = 2000


def format_found_reply(display_title: str, url: str) -> str:
    return f"Here's a link to the wiki page for **{display_title}**: <{url}>"


def format_not_found_reply(display_title: str, wiki_name: str = DEFAULT_WIKI_NAME) -> str:
    return f"Sorry, I couldn't find a wiki page for **{display_title}** on {wiki_name}."


def format_legacy_reply(display_title: str, found: bool, url: str, search_url: str) -> str:
    """Réponse à un lien vers l'ancien wiki Fandom."""
    text = f"Heads up! The Fandom wiki is outdated. You're looking for **{display_title}**? "

    if found:
        text += f"You can find the most current information on our new wiki here: <{url}>"
    else:
        text += (
            f"While the Fandom link is old, I couldn't find a direct match for **{display_title}** "
            f"on our new wiki. You might need to search for it: <{search_url}>"
        )
    return text


def format_missing_argument_reply() -> str:
    return "Please provide a page name!"


def truncate_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    """Tronque à `limit` caractères (suffixe "...")."""
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."
