"""gRPC transport layer for the mailing list.

This package hosts:
- The protocol buffer schema (in `protos/`) and its Python message/stub modules (in `stubs/`).
- Server bootstrap and interceptors.
- A thin service adapter that maps gRPC requests onto the subscriber store.
"""
