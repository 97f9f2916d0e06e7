# mediaplanner/domain/prompts.py
# Prompt text sent to the LLM. Answers are expected in Thai.
from typing import Dict, List, Optional

CATEGORIES = ("media-planning", "campaign-strategy", "kpi-funnel", "performance", "general")

APOLOGY = "ขออภัยครับ เกิดข้อผิดพลาดในการประมวลผล กรุณาลองใหม่อีกครั้ง"

SYSTEM_PROMPT = """คุณคือ AI Assistant ผู้เชี่ยวชาญด้าน Digital Marketing และ Media Planning
โดยเฉพาะสำหรับ Junior Digital Planner ที่กำลังเริ่มต้นในวงการ

หน้าที่ของคุณ:
- ตอบคำถามด้าน Media Planning, Campaign Strategy, KPI/Funnel, และ Performance Marketing
- อธิบายแนวคิดที่ซับซ้อนให้เข้าใจง่าย เหมาะกับระดับ junior
- ให้ตัวอย่างที่ชัดเจนและนำไปใช้ได้จริง
- ใช้ภาษาที่เป็นมิตร เข้าใจง่าย แต่มีความเป็นมืออาชีพ

รูปแบบการตอบ:
- ตอบเป็นข้อๆ ชัดเจน
- ใช้หัวข้อย่อยเมื่อมีหลายประเด็น
- ให้ตัวอย่างเมื่อจำเป็น
- หากไม่แน่ใจ ให้บอกและแนะนำแหล่งข้อมูลเพิ่มเติม"""

CATEGORY_PROMPTS: Dict[str, str] = {
    "media-planning": "คำถามนี้เกี่ยวกับ Media Planning\nโฟกัส: Channel selection, Budget allocation, Media mix, Reach & Frequency",
    "campaign-strategy": "คำถามนี้เกี่ยวกับ Campaign Strategy\nโฟกัส: Campaign objectives, Target audience, Creative strategy, Timeline",
    "kpi-funnel": "คำถามนี้เกี่ยวกับ KPI & Funnel\nโฟกัส: Metrics definition, Funnel stages, Conversion tracking, Performance indicators",
    "performance": "คำถามนี้เกี่ยวกับ Performance Marketing\nโฟกัส: Optimization, A/B testing, ROAS, CPA, Conversion rate",
    "general": "คำถามทั่วไปเกี่ยวกับ Digital Marketing\nโฟกัส: ตอบตามบริบทของคำถาม",
}

# Static reference snippets returned as "retrieved context"
KNOWLEDGE_BASE: Dict[str, List[str]] = {
    "media-planning": [
        "Media Planning คือ การวางแผนการใช้ช่องทาง (Channel) ต่างๆ เพื่อสื่อสารกับกลุ่มเป้าหมาย โดยคำนึงถึง Reach, Frequency, และ Budget",
        "Channel หลักๆ ที่ Digital Planner ควรรู้จัก: Facebook Ads, Google Ads, Line Ads, TikTok Ads, YouTube Ads, Display Network",
        "Budget allocation ควรพิจารณา: กลุ่มเป้าหมาย, Objective ของแคมเปญ, Cost per result ของแต่ละ channel",
    ],
    "campaign-strategy": [
        "Campaign Strategy ประกอบด้วย: Objective, Target Audience, Key Message, Creative Direction, และ Success Metrics",
        "Funnel แบ่งเป็น: Awareness (รู้จัก) → Interest (สนใจ) → Consideration (พิจารณา) → Conversion (ตัดสินใจ) → Loyalty (ภักดี)",
        "Creative ควรสอดคล้องกับ: Insight ของกลุ่มเป้าหมาย, Brand positioning, และ Media format",
    ],
    "kpi-funnel": [
        "KPIs สำหรับ Awareness: Reach, Impression, Brand Awareness Lift, Video Views",
        "KPIs สำหรับ Consideration: Click, Engagement Rate, Time on Site, Page Views",
        "KPIs สำหรับ Conversion: Conversion Rate, CPA, ROAS, Sales, Lead",
    ],
    "performance": [
        "Performance Marketing คือ การตลาดที่วัดผลได้ชัดเจน มุ่งเน้น Conversion และ ROI",
        "Optimization techniques: A/B Testing, Audience refinement, Bid strategy adjustment, Creative testing",
        "ROAS (Return on Ad Spend) = Revenue / Ad Spend × 100%",
    ],
    "general": [
        "Digital Marketing ประกอบด้วยหลายด้าน: Media Planning, Campaign Management, Performance Marketing, และ Analytics",
        "Tools สำคัญ: Facebook Ads Manager, Google Ads, Google Analytics, Meta Business Suite",
        "ทักษะสำคัญสำหรับ Digital Planner: Data Analysis, Strategic Thinking, Creative Brief Writing, Budget Management",
    ],
}


def build_chat_prompt(question: str, category: str, context: Optional[List[str]] = None) -> str:
    parts = [CATEGORY_PROMPTS.get(category, CATEGORY_PROMPTS["general"])]
    if context:
        refs = "\n".join(f"{i}. {c}" for i, c in enumerate(context, start=1))
        parts.append(f"ข้อมูลอ้างอิงที่เกี่ยวข้อง:\n{refs}")
    parts.append(f"คำถาม: {question}")
    return "\n\n".join(parts)


def build_summary_prompt(plan_text: str) -> str:
    return f"""You are a Senior Digital Media Planner. Write an executive summary in Thai for the client.

Media plan:
{plan_text}

Format:
1. One-sentence overview of the strategy.
2. Strengths of this channel split as 3-4 bullet points, referencing the allocations and the reasoning.
3. One "Pro Tip" for the first two weeks of execution.

Keep it concise and professional. Do not invent numbers that are not in the plan."""
