# =============================================================================
# core/forms.py  —  Demo forms (UI trees the demo server turns into tools)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Holds a few declarative UI trees written the way a host application
#   would hand them over.  Each one exercises a different corner of the
#   engine:
#
#   "contact"  → plain inputs wrapped in layout nodes, a <select> whose
#                options become enum/oneOf, descriptions added via overrides
#   "flights"  → pattern/length constraints, a number input, and an
#                `inputProps`-style wrapper component
#   "support"  → a control the walk can't see into (a rich-text editor),
#                declared explicitly and registered instead
#
# In a real host these trees come from the UI layer on every update; here
# they are fixed, like the mock data elsewhere in core/.
# =============================================================================

from typing import Optional

from core.models import DemoForm, element
from core.tree import declare_field


def _form_field(label: str, *controls):
    """A layout wrapper that knows nothing about tools (like most UI kits)."""
    return element("div", {"className": "form-group"}, element("label", None, label), *controls)


_CONTACT = DemoForm(
    tool_name="submit_contact",
    description="Submit a contact form message.",
    tree=element(
        "form", None,
        _form_field("Full Name", element("input", name="name", type="text", required=True, placeholder="Jane Smith")),
        _form_field("Email", element("input", name="email", type="email", required=True)),
        _form_field(
            "Subject",
            element(
                "select", {"name": "subject", "required": True},
                element("option", {"value": "general"}, "General Inquiry"),
                element("option", {"value": "support"}, "Technical Support"),
                element("option", {"value": "billing"}, "Billing Question"),
                element("option", {"value": "partnership"}, "Partnership"),
            ),
        ),
        _form_field("Message", element("textarea", name="message", required=True, rows=3)),
        element("button", {"type": "submit"}, "Send Message"),
    ),
    overrides={
        "name": {"description": "The sender's full name"},
        "email": {"description": "The sender's email address"},
        "subject": {"description": "The subject category"},
        "message": {"description": "The message body"},
    },
)

_FLIGHTS = DemoForm(
    tool_name="searchFlights",
    description="Searches for flights with the given parameters.",
    tree=element(
        "form", {"className": "flight-search-form"},
        _form_field("Origin", element("input", name="origin", required=True, pattern="^[A-Z]{3}$", minLength=3, maxLength=3)),
        _form_field("Destination", element("input", name="destination", required=True, pattern="^[A-Z]{3}$", minLength="3", maxLength="3")),
        _form_field(
            "Trip Type",
            element(
                "select", {"name": "tripType"},
                element("option", {"value": "one-way"}, "One way"),
                element("option", {"value": "round-trip"}, "Round trip"),
            ),
        ),
        _form_field("Outbound Date", element("input", name="outboundDate", type="date", required=True)),
        _form_field("Inbound Date", element("input", name="inboundDate", type="date")),
        # A wrapper component that puts the real input's props one level down.
        _form_field("Passengers", element("NumberField", inputProps={"name": "passengers"}, type="number", min=1, max=9)),
    ),
    overrides={
        "origin": {
            "description": "City or airport IATA code for the origin. Prefer city IATA codes "
                           "when a specific airport is not provided. Example: 'LON' for 'London'",
        },
        "destination": {
            "description": "City or airport IATA code for the destination. Prefer city IATA codes "
                           "when a specific airport is not provided. Example: 'NYC' for 'New York'",
        },
        "tripType": {"description": 'The trip type. Can be "one-way" or "round-trip".'},
        "outboundDate": {"description": "The outbound date in YYYY-MM-DD format."},
        "inboundDate": {"description": "The inbound date in YYYY-MM-DD format."},
        "passengers": {"description": "The number of passengers.", "required": True},
    },
)

_SUPPORT = DemoForm(
    tool_name="open_support_ticket",
    description="Open a support ticket with a priority and a detailed message.",
    tree=element(
        "form", None,
        _form_field("Email", element("Input", slotProps={"input": {"name": "email"}}, type="email", required=True)),
        _form_field("Details", element("RichTextEditor", placeholder="Describe the problem")),
    ),
    overrides={"email": {"description": "Where we send updates about the ticket"}},
    declared=[
        declare_field(
            "priority",
            element(
                "select", None,
                element("option", {"value": "low"}, "Low"),
                element("option", {"value": "normal"}, "Normal"),
                element("option", {"value": "high"}, "High"),
                element("option", {"value": "urgent"}, "Urgent"),
            ),
            description="Ticket urgency level",
        ),
        declare_field("details", type="text", required=True, description="The problem, in the user's words", min_length=10),
    ],
)

_DEMO_FORMS: dict[str, DemoForm] = {
    "contact": _CONTACT,
    "flights": _FLIGHTS,
    "support": _SUPPORT,
}


def get_form(form_id: str) -> Optional[DemoForm]:
    """Look up a demo form by id ("contact", "flights", "support")."""
    return _DEMO_FORMS.get(form_id.lower())


def list_available_forms() -> list[str]:
    return list(_DEMO_FORMS.keys())
