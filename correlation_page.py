"""
Correlation Calculator Page
Upload a CSV file, pick two columns and compare Pearson, Spearman and Kendall coefficients
"""

import streamlit as st

from config_utils import get_settings
from correlation_utils import (
    CorrelationError,
    calculate_correlations,
    correlation_summary_frame,
    create_correlation_scatter,
    format_correlation_report
)
from data_utils import DataFileError, load_csv_columns
from session_state_keys import (
    SESSION_CORRELATION_DATA,
    SESSION_CORRELATION_KENDALL_VARIANT,
    SESSION_CORRELATION_RESULT,
    SESSION_CORRELATION_VAR1,
    SESSION_CORRELATION_VAR2,
    set_data
)


def show():
    """
    Main function to display the Correlation Calculator page
    """
    settings = get_settings()

    st.title("📊 Correlation Calculator")
    st.markdown("""
    Compute the Pearson, Spearman and Kendall correlation coefficients between
    two numeric columns of a CSV file. Tied values receive the mean of their ranks.
    """)

    # === FILE UPLOAD ===
    st.markdown("---")
    st.markdown("## 📁 Data File")

    uploaded_file = st.file_uploader(
        "Upload a CSV file (first line: column names):",
        type=['csv'],
        help="Comma-separated file with a header row and numeric data"
    )

    if uploaded_file is None:
        st.info("💡 Upload a CSV file to begin")
        return

    try:
        uploaded_file.seek(0)
        data = load_csv_columns(uploaded_file)
    except DataFileError as e:
        st.error(f"❌ {e}")
        return

    set_data(st.session_state, data, uploaded_file.name)
    st.success(f"✅ Loaded **{len(data)} samples** × **{len(data.columns)} variables**")

    with st.expander("👁️ Preview Data"):
        st.dataframe(data.head(10).astype(float), use_container_width=True)

    columns = [str(col) for col in data.columns]
    if len(columns) < 2:
        st.error(f"❌ Need at least 2 numeric variables for correlation analysis. Found: {len(columns)}")
        return

    # === VARIABLE SELECTION ===
    st.markdown("---")
    st.markdown("## 🎯 Variable Selection")

    col1, col2, col3 = st.columns(3)

    with col1:
        var1 = st.selectbox(
            "Variable 1 (X-axis):",
            options=columns,
            index=0,
            key=SESSION_CORRELATION_VAR1
        )

    with col2:
        var2 = st.selectbox(
            "Variable 2 (Y-axis):",
            options=columns,
            index=1,
            key=SESSION_CORRELATION_VAR2
        )

    with col3:
        variants = ['b', 'a']
        default_variant = settings.engine.kendall_variant
        kendall_variant = st.radio(
            "Kendall's tau:",
            options=variants,
            index=variants.index(default_variant),
            format_func=lambda v: "tau-b (tie-adjusted)" if v == 'b' else "tau-a",
            key=SESSION_CORRELATION_KENDALL_VARIANT
        )

    if var1 == var2:
        st.info("ℹ️ Please select **two different variables**")
        return

    # === RESULTS ===
    data = st.session_state[SESSION_CORRELATION_DATA]
    places = settings.report.decimal_places

    try:
        result = calculate_correlations(
            var1,
            data[var1].tolist(),
            var2,
            data[var2].tolist(),
            kendall_variant=kendall_variant
        )
    except CorrelationError as e:
        st.error(f"❌ {e}")
        return

    st.session_state[SESSION_CORRELATION_RESULT] = result

    st.markdown("---")
    st.markdown("## 📈 Correlation Coefficients")

    metric_col1, metric_col2, metric_col3, metric_col4 = st.columns(4)
    with metric_col1:
        st.metric("Pearson r", f"{float(result.pearson):.4f}")
    with metric_col2:
        st.metric("Spearman ρ", f"{float(result.spearman):.4f}")
    with metric_col3:
        st.metric(f"Kendall τ-{result.kendall_variant}", f"{float(result.kendall):.4f}")
    with metric_col4:
        st.metric("Valid Points", result.n)

    summary_df = correlation_summary_frame(result, places)
    st.dataframe(summary_df, use_container_width=True, hide_index=True)

    with st.expander("📋 Text report"):
        st.code(format_correlation_report(result, places), language=None)

    # === SCATTER PLOT ===
    st.markdown("---")
    st.markdown("## 🎨 Scatter Plot")

    fig = create_correlation_scatter(data, var1, var2, result=result)
    st.plotly_chart(fig, use_container_width=True)
