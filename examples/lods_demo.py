import marimo

__generated_with = "0.16.1"
app = marimo.App()


@app.cell
def _():
    import marimo as mo
    import pandas as pd
    return mo, pd


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""# LODS Score Computation Demo""")
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    ## Compute Logistic Organ Dysfunction System (LODS) scores

    LODS grades dysfunction across 6 organ systems: neurologic, cardiovascular, renal, pulmonary, hematologic and hepatic.

    lodspy computes one score per ICU stay for every stay with a suspected infection, using the worst values observed over the whole stay.
    """
    )
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    ## Basic Usage

    The config file points at a directory holding one file per input table
    (`icustays`, `chartevents`, `ventdurations`, `bloodgasarterial`, `gcs`,
    `vitals`, `uo`, `labs`, `suspinfect`).
    """
    )
    return


@app.cell
def _():
    from lodspy import calculate_lods_from_files, setup_logging

    setup_logging()

    lods_df, timer = calculate_lods_from_files(
        config_path='config/lods_config.yaml',
        perf_profile=True,
    )
    return lods_df, timer


@app.cell
def _(lods_df, mo):
    mo.ui.table(lods_df)
    return


@app.cell
def _(lods_df, mo, timer):
    mo.md(f"""
    ```
    {timer.report(cohort_size=len(lods_df))}
    ```
    """)
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(
        r"""
    ## Score Distribution

    Missing components count as 0 in the total, so `lods` is never NULL.
    Components stay NULL when their inputs were never measured.
    """
    )
    return


@app.cell
def _(lods_df, mo):
    _distribution = (
        lods_df['lods'].value_counts().sort_index()
        .rename_axis('lods').reset_index(name='icu_stays')
    )
    mo.ui.table(_distribution)
    return


@app.cell
def _(lods_df, pd):
    from lodspy.utils.lods import COMPONENTS

    component_summary = pd.DataFrame({
        'measured': lods_df[COMPONENTS].notna().sum(),
        'mean_score': lods_df[COMPONENTS].mean(),
        'max_score': lods_df[COMPONENTS].max(),
    })
    component_summary
    return


@app.cell(hide_code=True)
def _(mo):
    mo.md(r"""## Inspecting Intermediate Steps""")
    return


@app.cell
def _():
    from lodspy.utils.lods import LODSConfig
    from lodspy import calculate_lods_from_files as _calc

    # widen the CPAP window to 6 hours after the last charted mask
    _result, intermediates = _calc(
        config_path='config/lods_config.yaml',
        lods_config=LODSConfig(cpap_end_offset_hours=6.0),
        dev=True,
    )
    intermediates['cpap'].df().head(10)
    return (intermediates,)


@app.cell
def _(intermediates):
    intermediates['pafi_flags'].df().query('vent == 1 or cpap == 1').head(10)
    return


if __name__ == "__main__":
    app.run()
