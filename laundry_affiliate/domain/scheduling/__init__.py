"""
Scheduling Domain - affiliate availability

Modules:
- calendar_math.py  Day-of-week keys, date-only normalization, day ranges
- schemas.py        Weekly template, date exceptions, settings (immutable values)
- resolver.py       Per-slot availability and range expansion
- conflicts.py      Active orders affected by a schedule change
- booking_gate.py   Accept or reject a requested pickup slot
- repository.py     Load and store the schedule document on the affiliate
- service.py        Schedule editing and public availability queries
- router.py         HTTP endpoints under /affiliates/{affiliate_id}
"""
