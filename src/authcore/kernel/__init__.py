"""
Kernel layer: identity core and the models of the reference SQL store.
"""
