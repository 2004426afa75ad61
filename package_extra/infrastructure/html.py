from typing import Optional
from bs4 import BeautifulSoup


def extract_attribute(html: str, selector: str, attribute: str) -> Optional[str]:
    """
    Returns the attribute of the first element matching a CSS selector,
    or None when no element matches or the attribute is missing.
    """
    soup = BeautifulSoup(html, 'html.parser')
    element = soup.select_one(selector)
    if element is None:
        return None
    value = element.get(attribute)
    if isinstance(value, list):
        # Multi-valued attributes (class, rel) come back as lists
        value = " ".join(value)
    return value
