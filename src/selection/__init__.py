"""Sensor Selection — selection state and the session state machine.

Modules
───────
  store      — SelectionStore: selected ids scoped to one catalogue
  session    — SessionController: location switch, load, confirm
  submission — collaborators receiving the confirmed snapshot
"""
