# =============================================================================
# core/flights.py  —  Demo flight search (execute handler for the flight form)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Backs the demo "searchFlights" tool whose input schema is compiled from
#   core/forms.py.  The catalogue is mock data; in production this would
#   wrap a flight API.
#
# CITY CODES:
#   Agents are told to prefer city IATA codes ("LON", "NYC").  A city code
#   matches every airport listed for it in _CITY_AIRPORTS; an airport code
#   matches only itself.
#
# VALUES ARE CHECKED HERE, NOT IN THE SCHEMA ENGINE:
#   The compiled schema already carries `pattern: ^[A-Z]{3}$`, but nothing
#   forces an agent to honour it.  Bad codes get an "ERROR: ..." string back
#   so the agent can correct itself and retry.
# =============================================================================

import re
from dataclasses import asdict
from typing import Any

from core.models import FlightOption

_IATA_CODE = re.compile(r"^[A-Z]{3}$")

_CITY_AIRPORTS: dict[str, tuple[str, ...]] = {
    "LON": ("LHR", "LGW", "STN", "LCY"),
    "NYC": ("JFK", "EWR", "LGA"),
}

_MOCK_FLIGHTS: list[FlightOption] = [
    FlightOption("British Airways", "BA", "LHR", "JFK", "09:00", "12:30", "8h 30m", 0, 650),
    FlightOption("Delta Air Lines", "DL", "LHR", "JFK", "11:15", "14:45", "8h 30m", 0, 580),
    FlightOption("United Airlines", "UA", "LHR", "EWR", "14:00", "17:20", "8h 20m", 0, 520),
    FlightOption("Virgin Atlantic", "VS", "LHR", "JFK", "10:30", "13:55", "8h 25m", 0, 720),
    FlightOption("American Airlines", "AA", "LHR", "JFK", "16:00", "19:30", "8h 30m", 0, 610),
    FlightOption("Norwegian", "DY", "LGW", "JFK", "08:00", "11:45", "8h 45m", 0, 350),
    FlightOption("Spirit Airlines", "NK", "LHR", "JFK", "08:49", "07:05", "22h 16m", 1, 380),
    FlightOption("Lufthansa", "LH", "LHR", "JFK", "06:30", "14:00", "12h 30m", 1, 480),
    FlightOption("Air France", "AF", "LHR", "JFK", "07:15", "15:30", "13h 15m", 1, 450),
]


def _airports(code: str) -> tuple[str, ...]:
    return _CITY_AIRPORTS.get(code, (code,))


def search_flights(arguments: dict[str, Any]) -> Any:
    """Execute handler for the flight-search tool.

    Args:
        arguments: The tool input, shaped by the compiled schema: origin,
            destination, tripType, outboundDate, inboundDate, passengers.

    Returns:
        An "ERROR: ..." string for invalid codes, otherwise a dict with the
        echoed search and the matching options, cheapest first.
    """
    origin = arguments.get("origin")
    destination = arguments.get("destination")

    if not isinstance(origin, str) or not _IATA_CODE.match(origin):
        return "ERROR: `origin` must be a 3 letter city or airport IATA code."
    if not isinstance(destination, str) or not _IATA_CODE.match(destination):
        return "ERROR: `destination` must be a 3 letter city or airport IATA code."

    passengers = arguments.get("passengers") or 1
    origins, destinations = _airports(origin), _airports(destination)
    matches = sorted(
        (f for f in _MOCK_FLIGHTS if f.origin in origins and f.destination in destinations),
        key=lambda f: f.price_usd,
    )

    search = {
        "origin": origin,
        "destination": destination,
        "tripType": arguments.get("tripType") or "one-way",
        "outboundDate": arguments.get("outboundDate"),
        "inboundDate": arguments.get("inboundDate"),
        "passengers": passengers,
    }
    if not matches:
        summary = f"No flights found from {origin} to {destination}."
    else:
        summary = (
            f"{len(matches)} flights from {origin} to {destination}; "
            f"cheapest ${matches[0].price_usd} per passenger ({matches[0].airline})."
        )
    return {
        "search": search,
        "summary": summary,
        "options": [asdict(f) for f in matches[:5]],
    }
