"""
Streamlit Session State Keys - Canonical Definitions
===================================================

Session state keys used by the correlation page. Using constants keeps the
page and its helpers in agreement about where data and results live.

Usage:
    from session_state_keys import SESSION_CORRELATION_DATA

    if SESSION_CORRELATION_DATA in st.session_state:
        df = st.session_state[SESSION_CORRELATION_DATA]
"""

# ============================================================================
# DATA MANAGEMENT
# ============================================================================

SESSION_CORRELATION_DATA = 'correlation_data'
"""
Dataset loaded from the uploaded CSV file (pd.DataFrame of Decimal columns)
"""

SESSION_CORRELATION_DATASET = 'correlation_dataset'
"""
Name of the uploaded file (str)
"""

# ============================================================================
# COLUMN SELECTION
# ============================================================================

SESSION_CORRELATION_VAR1 = 'correlation_var1'
"""
First selected column (str)
"""

SESSION_CORRELATION_VAR2 = 'correlation_var2'
"""
Second selected column (str)
"""

SESSION_CORRELATION_KENDALL_VARIANT = 'correlation_kendall_variant'
"""
Kendall's tau variant chosen on the page: 'a' or 'b' (str)
"""

# ============================================================================
# RESULTS
# ============================================================================

SESSION_CORRELATION_RESULT = 'correlation_result'
"""
Last computed coefficients (CorrelationResult)
"""


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def set_data(session_state, df: 'pd.DataFrame', name: str = None):
    """
    Store a newly loaded dataset and drop results computed from the previous one.

    Parameters
    ----------
    session_state : st.session_state
        Streamlit session state object
    df : pd.DataFrame
        Dataset to set as current
    name : str, optional
        Dataset name for display
    """
    if name and session_state.get(SESSION_CORRELATION_DATASET) != name:
        clear_results(session_state)
    session_state[SESSION_CORRELATION_DATA] = df
    if name:
        session_state[SESSION_CORRELATION_DATASET] = name


def clear_results(session_state):
    """
    Clear the column selection and computed result from session state.

    Parameters
    ----------
    session_state : st.session_state
        Streamlit session state object
    """
    result_keys = [
        SESSION_CORRELATION_VAR1,
        SESSION_CORRELATION_VAR2,
        SESSION_CORRELATION_RESULT,
    ]

    for key in result_keys:
        if key in session_state:
            del session_state[key]
