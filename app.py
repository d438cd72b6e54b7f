import streamlit as st
import pandas as pd

from glide_stats.domain import GlideConfig, PRESET_CONFIGS
from glide_stats.replay import replay_csv, replay_metrics
from glide_stats.render import make_replay_figure


# -----------------------------
# Streamlit page setup
# -----------------------------
st.set_page_config(page_title="Glider Stats", layout="wide")
st.title("🪂 Glider Stats: Glide Ratio Replay")
st.write("Upload a flight telemetry CSV and see how glide ratio and descent speed settle over the trailing window.")


# -----------------------------
# Session-state helper
# -----------------------------
def _load_config_into_state(c: GlideConfig) -> None:
    st.session_state["c_name"] = c.name
    st.session_state["c_sampling_window_s"] = float(c.sampling_window_s)
    st.session_state["c_stabilization_pct"] = float(100.0 * c.stabilization_threshold)
    st.session_state["c_allow_trim"] = bool(c.allow_trim)
    st.session_state["c_allow_control_input"] = bool(c.allow_control_input)


# -----------------------------
# Sidebar: config selection/edit
# -----------------------------
with st.sidebar:
    st.header("Settings")

    preset_name = st.selectbox("Preset", options=list(PRESET_CONFIGS.keys()), index=0)
    preset = PRESET_CONFIGS[preset_name]

    # Initialize state on first run or when preset changes
    if st.session_state.get("selected_preset_name") != preset_name:
        st.session_state["selected_preset_name"] = preset_name
        _load_config_into_state(preset)

    edit = st.checkbox("Edit config", value=False)
    if st.button("Reset to preset"):
        _load_config_into_state(preset)

    if edit:
        st.subheader("Edit values")
        st.text_input("Config name", key="c_name")
        st.number_input("Sampling window (s)", min_value=0.25, step=0.25, key="c_sampling_window_s")
        st.number_input("Stabilization threshold (%)", min_value=0.0, step=0.1, key="c_stabilization_pct")
        st.checkbox("Allow trim", key="c_allow_trim")
        st.checkbox("Allow control input (SAS / stick)", key="c_allow_control_input")
    else:
        st.subheader("Preset values (read-only)")
        st.write(
            {
                "name": preset.name,
                "sampling_window_s": preset.sampling_window_s,
                "stabilization_threshold": preset.stabilization_threshold,
                "allow_trim": preset.allow_trim,
                "allow_control_input": preset.allow_control_input,
            }
        )


# Build the config AFTER sidebar widgets exist
if edit:
    try:
        config = GlideConfig(
            name=st.session_state["c_name"],
            sampling_window_s=float(st.session_state["c_sampling_window_s"]),
            stabilization_threshold=float(st.session_state["c_stabilization_pct"]) / 100.0,
            allow_trim=bool(st.session_state["c_allow_trim"]),
            allow_control_input=bool(st.session_state["c_allow_control_input"]),
        )
    except ValueError as e:
        st.error(f"Invalid config: {e}")
        st.stop()
else:
    config = preset

st.caption(f"Active config: **{config.name}** ({config.sampling_window_s:.1f} s window, {config.capacity} samples)")


# -----------------------------
# Upload + preview
# -----------------------------
uploaded = st.file_uploader("Upload CSV", type=["csv"])

if uploaded is None:
    st.info("Upload a CSV with columns t, vs_mps (or vs_fpm), hspeed_mps, speed_mps to begin.")
    st.stop()

uploaded.seek(0)
df_preview = pd.read_csv(uploaded, nrows=20)
st.subheader("Raw preview (as uploaded)")
st.dataframe(df_preview, use_container_width=True)
uploaded.seek(0)


# -----------------------------
# Run replay
# -----------------------------
out, err = replay_csv(uploaded, config)

if err or out is None:
    st.error(err or "Replay failed (no result returned).")
    st.stop()

metrics = replay_metrics(out)


# -----------------------------
# Display results
# -----------------------------
col1, col2, col3 = st.columns([2, 1, 1])
col1.metric("Final status", out["status"].iloc[-1])
col2.metric("Gliding (%)", f"{metrics['pct_gliding']:.1f}")
col3.metric("Full window (%)", f"{metrics['pct_full_window']:.1f}")

st.subheader("Summary metrics")
st.json(metrics)

st.subheader("Disqualifications")
reasons = out.loc[out["state"] != "tracking", "reason"].value_counts()
if len(reasons) == 0:
    st.success("Every tick counted as gliding.")
else:
    st.dataframe(reasons.rename("ticks").to_frame(), use_container_width=True)

st.subheader("Glide plot")
fig = make_replay_figure(out, config)
st.pyplot(fig, clear_figure=True)
