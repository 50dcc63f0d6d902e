"""Sample import documents for every supported format, served to the admin UI."""

MCQ_EXAMPLE_EN = """**[Subject: Physics]**
**[Chapter: Motion]**
**[Lesson: Velocity]**
**[Board: Dhaka Board 2023]**
**1.** What is the SI unit of velocity?
a) m/s
b) m/s²
c) km/h
d) N
Correct: a
Explanation: Velocity is displacement per unit time, so its SI unit is metre per second.

**2.** Which quantity is a vector?
a) Speed
b) Mass
c) Displacement
d) Time
Correct: c
Explanation: Displacement has both magnitude and direction.
---
**[Subject: Chemistry]**
**[Chapter: Periodic Table]**
**1.** What is the chemical symbol of sodium?
a) S
b) Na
c) So
d) Sn
Correct: b
"""

MCQ_EXAMPLE_BN = """**[বিষয়: পদার্থবিজ্ঞান]**
**[অধ্যায়: গতি]**
**১.** বেগের এসআই একক কোনটি?
ক) মি/সে
খ) মি/সে²
গ) কিমি/ঘণ্টা
ঘ) নিউটন
সঠিক: ক
ব্যাখ্যা: বেগ হলো একক সময়ে সরণ।
"""

CQ_EXAMPLE_EN = """[Subject: Chemistry]
[Chapter: Chemical Reactions]
[Board: Rajshahi Board 2022]

**Question 1**
Rahim dissolved some blue crystals in water and heated the solution.
a. What is a dye? (1)
b. Why is copper sulphate blue? (2)
c. Explain what happens when the solution is heated. (3)
d. Analyse whether the change is physical or chemical. (4)
Answer:
a. A dye is a coloured substance used to colour materials.
b. The hydrated copper ion absorbs red light.
c. Water evaporates and the crystals turn white.
d. The change is reversible, so it is physical.
"""

CQ_EXAMPLE_BN = """বিষয়: রসায়ন
অধ্যায়: রাসায়নিক বিক্রিয়া
বোর্ড: ঢাকা বোর্ড ২০২৪

উদ্দীপক:
> রহিম পানিতে কিছু নীল স্ফটিক দ্রবীভূত করল।
প্রশ্ন:
ক। রঞ্জক কী? (১)
খ। কপার সালফেট নীল কেন? (২)
গ। দ্রবণটি উত্তপ্ত করলে কী ঘটে? (৩)
ঘ। পরিবর্তনটি ভৌত না রাসায়নিক বিশ্লেষণ কর। (৪)
উত্তর:
ক। রঞ্জক হলো রঙিন পদার্থ।
খ। আর্দ্র কপার আয়ন লাল আলো শোষণ করে।
গ। পানি বাষ্পীভূত হয়।
ঘ। পরিবর্তনটি ভৌত।
"""

SQ_EXAMPLE_EN = """[Subject: Biology]
[Chapter: Cell]
1. What is a cell?
Answer: The basic structural and functional unit of life.
2. Who discovered the cell? Answer: Robert Hooke
---
[Subject: Biology]
a. What is the powerhouse of the cell? (2)
b. What controls the activities of the cell? (2)
Answer:
a. Mitochondria
b. Nucleus
"""

SQ_EXAMPLE_BN = """বিষয়: জীববিজ্ঞান
১. কোষ কী?
উত্তর: জীবের গঠন ও কাজের একক।
২. কোষ কে আবিষ্কার করেন?
উত্তর: রবার্ট হুক
"""

MATH_EXAMPLE = """**[Subject: Higher Math]**
**[Chapter: Matrices]**
**Stem:** Let \\( A = \\begin{pmatrix} 1 & 2 \\\\ 3 & 4 \\end{pmatrix} \\).
**Question 1a** Find \\( |A| \\). (2)
**Answer 1a** \\( |A| = 1 \\cdot 4 - 2 \\cdot 3 = -2 \\)
**Question 1b** Find \\( A^{-1} \\).
**Answer 1b** \\( A^{-1} = -\\frac{1}{2} \\begin{pmatrix} 4 & -2 \\\\ -3 & 1 \\end{pmatrix} \\)
"""

LESSON_EXAMPLE = """Subject: Physics Chapter: Motion
### Topic 1: Velocity
Velocity describes how fast and in which direction a body moves.
#### Subtopic 1.1: Speed
**Definition:** Distance covered per unit time.
**Explanation:** Speed is a scalar quantity.
**Memorizing/Understanding shortcut:** Speed has no direction.
**Common Misconceptions/Mistakes:** Treating speed and velocity as the same.
**Difficulty:** Easy
### Review Questions & Answers
Q1: Which of these is a scalar?
a) Velocity
b) Speed
c) Force
d) Acceleration
Correct: b
Explanation: Speed has magnitude only.
"""

OVERVIEW_EXAMPLE = """### T-01: Work
*   **Definition:** Work is done when a force causes an object to move.
*   **Unit:** The unit of work is the Joule (J).

### T-02: Energy
*   **Definition:** Energy is the ability to do work.
*   **Types:**
    *   Kinetic Energy
    *   Potential Energy
"""

OVERVIEW_BULK_EXAMPLE = """**English Version (Motion)**
### T-01: Rest and Motion
*   A body is at rest when its position does not change.
### T-02: Speed
*   Distance covered per unit time.

**বাংলা সংস্করণ (গতি)**
### টি-০১: স্থিতি ও গতি
*   সময়ের সাথে অবস্থান পরিবর্তন না হলে বস্তু স্থির।
"""

FORMAT_EXAMPLES = {
    'mcq': {'en': MCQ_EXAMPLE_EN, 'bn': MCQ_EXAMPLE_BN},
    'cq': {'en': CQ_EXAMPLE_EN, 'bn': CQ_EXAMPLE_BN},
    'sq': {'en': SQ_EXAMPLE_EN, 'bn': SQ_EXAMPLE_BN},
    'math': {'en': MATH_EXAMPLE},
    'lesson': {'en': LESSON_EXAMPLE},
    'overview': {'en': OVERVIEW_EXAMPLE, 'bulk': OVERVIEW_BULK_EXAMPLE},
}
