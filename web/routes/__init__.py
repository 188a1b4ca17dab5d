"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- employees: 직원 계정 관리
- ledger: 입금 / 차감 / 이력 / 대사
- restaurants: 식당 및 메뉴 관리
- orders: 주문 생성 및 상태 관리
"""
