# Marks `gadget_api.deps` as a package so `from gadget_api.deps.auth import require_user` works.
