"""
JML Task Routing - classification-based routing and task materialization

Turns the items selected for an HR process (onboarding, internal move,
offboarding) into a concrete, assigned, scheduled and approvable task list:
- Classification rules resolved by scope specificity
- Static default policy when no rule applies
- Routing merged with task templates and a due-date anchor
- Editable working set handed to task persistence on confirmation
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
