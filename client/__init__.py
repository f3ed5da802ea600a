"""
Client package.
Python-клиент API Mini App: JSON-RPC, кэш снимков и сторы.
"""
