from prometheus_client import Counter

ANALYTICS_EVENTS = Counter(
    "analytics_events_total",
    "Analytics tracking attempts by outcome",
    ["kind", "outcome"],  # kind: view | click; outcome: recorded | duplicate | rejected | failed
)

MENU_ASSEMBLIES = Counter(
    "menu_assemblies_total",
    "Public menu assemblies",
    ["outcome"],  # served | not_found | store_error
)
