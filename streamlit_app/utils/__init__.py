"""
Utility modules for the Streamlit frontend.

This package contains:
- renderer: StreamlitRenderer, folding catalog signals into a view dictionary
- session: per-session ViewController wiring and the async bridge
"""
