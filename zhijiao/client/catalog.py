def matches_search(resource: dict, search_term: str) -> bool:
    term = (search_term or "").lower()
    if not term:
        return True
    if term in (resource.get("title") or "").lower():
        return True
    if term in (resource.get("description") or "").lower():
        return True
    return any(term in str(tag).lower() for tag in resource.get("tags") or [])


def filter_resources(
    resources: list[dict],
    search_term: str = "",
    tab: str = "all",
    tag: str | None = None,
) -> list[dict]:
    """Apply the listing filters: free-text search, type tab and selected tag."""
    return [
        resource
        for resource in resources
        if matches_search(resource, search_term)
        and (tab == "all" or resource.get("type") == tab)
        and (not tag or tag in (resource.get("tags") or []))
    ]
