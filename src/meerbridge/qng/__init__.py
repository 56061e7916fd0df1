"""
qng - JSON-RPC bridge to the qng chain's ``qng_*`` namespace.

envelope: request/response wire shapes
rpc:      the generic invoker (one POST per call, no retries)
adapter:  the named qng_* methods served to bundler clients
"""
