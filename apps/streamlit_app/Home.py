# apps/streamlit_app/Home.py
import streamlit as st
import pandas as pd

# --- make the project root importable on Streamlit Cloud ---
import sys, os
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)
# -----------------------------------------------------------

from claimright.schema import Claimant, HouseholdParams, Assumptions, SurvivorPolicy
from claimright.errors import DomainRangeError, MissingSpouseDataError
from claimright.comparator import (
    cached_compare_strategies, claiming_scenarios, lifetime_benefit_comparison, optimize_for_couple,
)
from claimright.projection import benefits_frame, comparison_frame
from claimright.after_tax import rank_states_by_after_tax, state_tax_leakage
from claimright.taxes_states.registry import STATE_NAMES, get_state_rule, all_state_rules

# -------------------------------------------------
# App configuration
# -------------------------------------------------
st.set_page_config(page_title="ClaimRight — Social Security Claiming Strategy", layout="wide")
st.title("ClaimRight — Social Security Claiming Strategy")
st.set_option("client.showErrorDetails", True)

tab_profile, tab_strategies, tab_optimizer, tab_states = st.tabs(["Profile", "Strategies", "Optimizer", "States"])

# ===============================
# PROFILE TAB
# ===============================
with tab_profile:
    st.header("👤 Profile")
    c1, c2, c3 = st.columns(3)
    with c1:
        filing_status = st.selectbox("Filing Status", ["MFJ", "Single", "MFS", "HOH"], index=0)
        state = st.selectbox("State", sorted(STATE_NAMES), index=sorted(STATE_NAMES).index("MD"))
    with c2:
        st.subheader("You")
        p_pia  = st.number_input("Your PIA (monthly at FRA)", value=2500.0, step=50.0, min_value=0.0)
        p_fra  = st.number_input("Your FRA", value=67.0, step=0.5, min_value=66.0, max_value=67.0)
        p_age  = st.number_input("Your current age", value=60, min_value=18, max_value=100)
        p_le   = st.number_input("Your life expectancy", value=90, min_value=18, max_value=110)
    with c3:
        add_spouse = st.checkbox("Married", value=True)
        if add_spouse:
            st.subheader("Spouse")
            s_pia = st.number_input("Spouse PIA (monthly at FRA)", value=1800.0, step=50.0, min_value=0.0)
            s_fra = st.number_input("Spouse FRA", value=67.0, step=0.5, min_value=66.0, max_value=67.0)
            s_age = st.number_input("Spouse current age", value=58, min_value=18, max_value=100)
            s_le  = st.number_input("Spouse life expectancy", value=95, min_value=18, max_value=110)

    a1, a2, a3 = st.columns(3)
    with a1:
        cola = st.number_input("SS COLA %", value=2.54, step=0.1)
    with a2:
        other_income = st.number_input("Other income ($/yr, for benefit taxation)", value=30_000.0, step=1_000.0)
    with a3:
        early_survivor = st.checkbox("Allow survivor benefit before own claim", value=False)

    spouse = Claimant(float(s_pia), float(s_fra), int(s_age), int(s_le)) if add_spouse else None
    params = HouseholdParams(
        primary=Claimant(float(p_pia), float(p_fra), int(p_age), int(p_le)),
        spouse=spouse,
        is_married=add_spouse,
        cola_rate=float(cola) / 100.0 if cola > 1 else float(cola),  # accept 2.54 or 0.0254
        filing_status=filing_status,
        tax_rule=get_state_rule(state),
    )
    assumptions = Assumptions(
        other_income=float(other_income),
        survivor_policy=SurvivorPolicy.EARLY_SURVIVOR if early_survivor else SurvivorPolicy.AT_OWN_CLAIM,
    )

    st.subheader("Your claiming ages at a glance")
    headline = lifetime_benefit_comparison(params.primary.base_pia, params.primary.reference_age,
                                           params.primary.current_age, params.primary.life_expectancy_age,
                                           params.cola_rate, assumptions=assumptions)
    for col, (age, total) in zip(st.columns(len(headline)), headline.items()):
        col.metric(f"Lifetime if claimed at {age}", f"${total:,.0f}")
    st.dataframe(pd.DataFrame(claiming_scenarios(params.primary.base_pia, params.primary.reference_age,
                                                 params.primary.current_age, params.primary.life_expectancy_age,
                                                 params.cola_rate, assumptions)),
                 use_container_width=True)

# ===============================
# STRATEGIES TAB
# ===============================
with tab_strategies:
    st.header("📊 Strategy Comparison")
    s1, s2 = st.columns(2)
    with s1:
        you_claim = st.number_input("Your claim age", value=67, min_value=62, max_value=70)
    with s2:
        sp_claim = st.number_input("Spouse claim age", value=67, min_value=62, max_value=70) if add_spouse else None

    try:
        result = cached_compare_strategies(params, assumptions,
                                           (int(you_claim), int(sp_claim) if sp_claim is not None else None))
        st.info(result.recommendation)
        st.dataframe(comparison_frame(result), use_container_width=True)

        pick = st.selectbox("Year-by-year detail", [s.name for s in result.strategies])
        chosen = next(s for s in result.strategies if s.name == pick)
        df = benefits_frame(chosen, round_whole=True)
        st.line_chart(pd.DataFrame({s.name: benefits_frame(s).set_index("Age")["Cumulative Benefit"]
                                    for s in result.strategies}))
        st.dataframe(df, use_container_width=True)
    except (DomainRangeError, MissingSpouseDataError) as e:
        st.error(str(e))

# ===============================
# OPTIMIZER TAB
# ===============================
with tab_optimizer:
    st.header("🔎 Claiming Age Optimizer")
    if st.button("Search all claiming ages", type="primary"):
        with st.spinner("Scoring every combination..."):
            try:
                opt = optimize_for_couple(params, assumptions)
                st.success(opt.explanation)
                m1, m2, m3 = st.columns(3)
                m1.metric("Combinations", opt.total_combinations)
                m2.metric("Lifetime benefits", f"${opt.best_cumulative_income:,.0f}")
                m3.metric("Paid to survivor", f"${opt.best_survivor_benefit:,.0f}")
                st.dataframe(benefits_frame(opt.best_strategy, round_whole=True), use_container_width=True)
            except (DomainRangeError, MissingSpouseDataError) as e:
                st.error(str(e))
    else:
        st.caption("Click **Search all claiming ages** to score every claiming-age pair.")

# ===============================
# STATES TAB
# ===============================
with tab_states:
    st.header("🧾 State Tax Impact")
    annual = st.number_input("Annual household benefit ($)", value=50_000.0, step=1_000.0)
    rules = all_state_rules()
    ranked = rank_states_by_after_tax(annual, rules, other_income=float(other_income), filing_status=filing_status)
    st.dataframe(pd.DataFrame([r.__dict__ for r in ranked]), use_container_width=True)

    st.subheader("30-year state tax leakage")
    leak = state_tax_leakage(annual, [r for r in rules if r.benefits_taxable], cola_rate=params.cola_rate)
    st.dataframe(pd.DataFrame([r.__dict__ for r in leak]), use_container_width=True)
