"""
Ceremony Slot Engine

Pipeline that turns the availability of a celebrant (BABS) and a venue
(locatie) into bookable ceremony slots:
- Recurrence expansion (expander.py)
- Blocked dates and booked ceremonies (blocking.py)
- Dual-resource intersection (intersector.py)
- Slot generation and language filter (slots.py)
- Orchestration (engine.py)
"""
