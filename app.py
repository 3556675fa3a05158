# app.py
import streamlit as st

from checkup_recommender.config import get_settings
from checkup_recommender.display import (
    band_caption,
    category_icon,
    checkups_frame,
    gender_badge,
    priority_label,
)
from checkup_recommender.engine import get_engine
from checkup_recommender.lifestyle import LIFESTYLE_TAGS, TAGS_BY_KEY
from checkup_recommender.log import setup_logger
from checkup_recommender.matcher import matches_lifestyle
from checkup_recommender.planner import Priority
from checkup_recommender.profile import Gender
from checkup_recommender.session import NO_RISK_MESSAGE, VALIDATION_MESSAGE, CheckupSession

settings = get_settings()
setup_logger(level=settings.log_level)

st.set_page_config(page_title="智能体检清单生成器", layout="wide")
st.caption("HEALTHY BODY CHECKUP")
st.title("智能体检清单生成器")

st.markdown("根据你的年龄与生活方式，智能匹配高风险疾病，并给出更有针对性的体检建议。"
            "专业健康科普，仅供参考，不能替代线下就医。")

GENDER_OPTIONS = {
    Gender.UNSPECIFIED: "不填写",
    Gender.MALE: "♂ 男 Male",
    Gender.FEMALE: "♀ 女 Female",
}

# One session per browser tab; the engine itself is shared and stateless
if "checkup_session" not in st.session_state:
    st.session_state.checkup_session = CheckupSession(engine=get_engine(settings))
session: CheckupSession = st.session_state.checkup_session

with st.form("profile_form"):
    st.subheader("基本信息与生活方式")
    st.caption("这些信息仅用于本地计算，不会被上传。")
    age_text = st.text_input("年龄（岁）", value=session.age_text, placeholder="请输入你的年龄，例如 28")
    gender = st.radio(
        "性别",
        options=list(GENDER_OPTIONS),
        index=list(GENDER_OPTIONS).index(session.gender),
        format_func=lambda g: GENDER_OPTIONS[g],
        horizontal=True,
    )
    tags = st.multiselect(
        "生活方式标签（勾选越贴近你当前状态的标签，推荐的潜在风险就越精准）",
        options=[t.key for t in LIFESTYLE_TAGS],
        default=session.selected_tags,
        format_func=lambda k: f"{TAGS_BY_KEY[k].label}：{TAGS_BY_KEY[k].description}",
    )
    submitted = st.form_submit_button("生成体检清单")

if submitted:
    session.set_age(age_text)
    session.set_gender(gender)
    # keep click order for tags still selected, append new ones
    for key in list(session.selected_tags):
        if key not in tags:
            session.toggle_tag(key)
    for key in tags:
        if key not in session.selected_tags:
            session.toggle_tag(key)
    session.request_generation()

st.caption("提示：本工具基于常见慢性病的流行病学规律进行智能匹配，不构成诊断或处方建议。")

if session.show_validation_error:
    st.error(VALIDATION_MESSAGE)

result = session.result()
col_checkups, col_risks = st.columns(2)

with col_checkups:
    driver = "年龄 + 性别驱动" if session.gender != Gender.UNSPECIFIED else "年龄驱动"
    st.subheader(f"必查体检项目（按年龄段推荐） · {driver}")
    band = band_caption(session.age, session.engine.tables.sections) if session.generated else ""
    if band:
        st.caption(f"当前年龄段：{band}")
    if not session.generated or not result.checkups:
        st.info("输入年龄并点击“生成体检清单”后，将根据不同年龄段自动生成一份基础必查体检项目列表。")
    else:
        for item in result.checkups:
            badge = ":red[" if item.priority == Priority.HIGH else ":orange["
            st.markdown(f"- **{item.title}** {badge}{priority_label(item.priority)}]")
            if item.description:
                st.caption(item.description)
        with st.expander("以表格查看"):
            st.dataframe(checkups_frame(result.checkups), hide_index=True, use_container_width=True)

with col_risks:
    st.subheader("潜在患病风险（点击查看详情）")
    if not session.generated:
        st.info("选择与你相符的生活方式标签并生成体检清单后，将在此展示匹配的潜在疾病风险。"
                "你可以展开每一项，查看对应的诱因、典型症状和改善方法。")
    elif not result.has_risks:
        st.success(NO_RISK_MESSAGE)
    else:
        for disease in result.risks:
            marker = " 🔴" if matches_lifestyle(disease, session.selected_tags) else ""
            header = (f"{category_icon(disease.category)} {disease.name} · {disease.category} · "
                      f"{gender_badge(disease.gender)}{marker}")
            is_open = session.open_disease_id == disease.id
            st.button(f"{'▾' if is_open else '▸'} {header}", key=f"disease-{disease.id}",
                      on_click=session.toggle_disease, args=(disease.id,), use_container_width=True)
            if not is_open:
                continue
            with st.container(border=True):
                st.write(f"适用年龄：{disease.min_age} - {disease.max_age} 岁")
                st.markdown("**可能诱因**")
                st.markdown("\n".join(f"- {c}" for c in disease.causes))
                st.markdown("**典型症状**")
                st.markdown("\n".join(f"- {s}" for s in disease.symptoms))
                st.markdown("**生活方式改善建议**")
                st.markdown("\n".join(f"- {i}" for i in disease.improvements))
                st.warning("专家建议：以上为该疾病相关的通用健康科普信息，不能替代医生面诊与正式诊断。"
                           "如出现上述症状或持续不适，建议尽早前往正规医院，由相关专科医生进行评估与处理。")

st.markdown("---")
st.caption("免责声明：本工具仅用于健康教育与自我评估参考，所有内容均不能替代专业医生的面诊、检查与诊断。"
           "本页面不存储任何个人健康数据。")
