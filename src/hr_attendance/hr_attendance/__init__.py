"""HR attendance & leave accounting engine.

This package is organized by feature modules (attendance, leaves, employees,
rollup) with pure calculation modules at the bottom, Protocol repositories
plus MySQL implementations in the middle and a thin Flask JSON layer on top.
"""
