"""Core modules: tier output loading and hierarchical fusion"""
