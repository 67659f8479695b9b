"""
UI components for the Recipe Finder Streamlit app.

- cards: recipe/category/area/ingredient grids and the recipe detail panel
- feedback: error, empty, loading and toast states
"""
