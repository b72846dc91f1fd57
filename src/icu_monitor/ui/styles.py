import streamlit as st

GLOBAL_CSS = """
<style>
.block-container {
    padding-top: 2rem;
}

.icu-card {
  border-radius:18px;
  padding:0;
  overflow:hidden;
  background:#ffffff;
  border:1px solid rgba(0,0,0,0.08);
  margin-bottom:12px;
}

.icu-head {
  display:flex;
  align-items:center;
  justify-content:space-between;
  padding:10px 12px;
  color:white;
}

.icu-head-normal  { background:linear-gradient(90deg,#0ea5e9 0%, #38bdf8 100%); }
.icu-head-warning { background:linear-gradient(90deg,#f59e0b 0%, #fbbf24 100%); }
.icu-head-danger  { background:linear-gradient(90deg,#ff0000 0%, #f87171 100%); }

.icu-left {display:flex; align-items:center; gap:10px;}
.icu-avatar {
  width:36px; height:36px; border-radius:50%; background:rgba(255,255,255,.25);
  display:grid; place-items:center; font-weight:800; letter-spacing:.5px;
}
.icu-name {font-weight:700; line-height:1.05;}
.icu-sub {font-size:11px; opacity:.9}

.icu-body {padding:10px 12px; display:grid; grid-template-columns:1fr 1fr; gap:6px;}
.icu-v {border:1px solid rgba(0,0,0,.06); border-radius:10px; padding:6px 8px; background:#f8fafc;}
.icu-v .lab {font-size:11px; opacity:.65;}
.icu-v .val {font-size:16px; font-weight:800;}

.val-ok  { color:#065f46; }
.val-mod { color:#ffb400; }
.val-sev { color:#ff0000; }

</style>
"""


def inject() -> None:
    """Inject global CSS into the Streamlit page."""
    st.markdown(GLOBAL_CSS, unsafe_allow_html=True)
