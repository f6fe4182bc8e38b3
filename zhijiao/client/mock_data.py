"""Static resources shown when the API cannot be reached."""

INITIAL_RESOURCES = [
    {
        "id": "1",
        "title": "用 AI 辅助古诗词教学的五个课堂环节",
        "description": "从导入、朗读、意象分析到仿写，梳理大模型在古诗词课堂中的具体用法。",
        "type": "article",
        "author": "管理员",
        "date": "2025-03-01",
        "tags": ["古诗词", "课堂设计", "AI"],
        "link": "#",
        "likes": 42,
        "content": "## 导入\n\n让学生先向 AI 提问诗人的生平，再对照教材注释辨析真伪。",
    },
    {
        "id": "2",
        "title": "整本书阅读任务单模板",
        "description": "适用于初中名著阅读的任务单，含阅读进度、人物关系图与思辨问题。",
        "type": "resource",
        "author": "管理员",
        "date": "2025-02-18",
        "tags": ["整本书阅读", "模板"],
        "link": "#",
        "likes": 27,
        "content": "",
    },
    {
        "id": "3",
        "title": "作文批改助手",
        "description": "按评分细则给出分项反馈的写作批改工具。",
        "type": "tool",
        "author": "管理员",
        "date": "2025-01-20",
        "tags": ["写作", "批改", "AI"],
        "link": "#",
        "likes": 63,
        "content": "",
    },
]
