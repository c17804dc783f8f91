"""Per-capability mixins combined by the resource classes.

Each mixin adds one API operation (create, delete, list, post-list, save) on
top of ``APIResource``; import them from their submodules.
"""
